# insumos/usecases/cadastros.py
"""
UC: Cadastros de categorias e fornecedores.

- Nomes são únicos (NomeDuplicadoError) e obrigatórios (ValidacaoError).
- Categoria referenciada por algum lote não pode ser excluída nem mudar de
  tipo de unidade.
- Excluir fornecedor deixa os lotes dele sem fornecedor (FK SET NULL).
- Renomear não altera nomes já copiados em saídas e sessões.
"""

from __future__ import annotations

import sqlite3
from typing import List, Optional

from insumos.domain.conversao import TIPOS_CATEGORIA
from insumos.domain.erros import (
    CategoriaEmUsoError,
    CategoriaNaoEncontradaError,
    ConflitoError,
    FornecedorNaoEncontradoError,
    NomeDuplicadoError,
    ValidacaoError,
)
from insumos.domain.models import Categoria, Fornecedor
from insumos.infra.banco import Banco
from insumos.infra.logger import log_database_operation
from insumos.infra.repositories import CategoriaRepo, FornecedorRepo


def _nome_obrigatorio(nome: Optional[str]) -> str:
    s = (nome or "").strip()
    if not s:
        raise ValidacaoError("Nome é obrigatório", campo="nome")
    return s


def _tipo_valido(tipo_unidade: Optional[str]) -> str:
    t = (tipo_unidade or "cartao").strip().lower()
    if t not in TIPOS_CATEGORIA:
        raise ValidacaoError(
            f"Tipo de unidade inválido: {tipo_unidade!r} (use {', '.join(TIPOS_CATEGORIA)})",
            campo="tipo_unidade",
        )
    return t


# -------------------------
# Categorias
# -------------------------

def criar_categoria(banco: Banco, nome: str, tipo_unidade: str = "cartao") -> Categoria:
    nome = _nome_obrigatorio(nome)
    tipo = _tipo_valido(tipo_unidade)
    try:
        with banco.transacao() as c:
            cat = CategoriaRepo(c).insert(nome, tipo)
    except sqlite3.IntegrityError as e:
        raise NomeDuplicadoError("categoria", nome) from e
    log_database_operation("categorias", "INSERT", 1, nome=nome, tipo_unidade=tipo)
    return cat


def editar_categoria(banco: Banco, categoria_id: int, nome: Optional[str] = None,
                     tipo_unidade: Optional[str] = None) -> Categoria:
    try:
        with banco.transacao() as c:
            repo = CategoriaRepo(c)
            atual = repo.get(categoria_id)
            if atual is None:
                raise CategoriaNaoEncontradaError(categoria_id)
            novo_nome = _nome_obrigatorio(nome) if nome is not None else atual.nome
            novo_tipo = _tipo_valido(tipo_unidade) if tipo_unidade is not None else atual.tipo_unidade
            if novo_tipo != atual.tipo_unidade:
                # pacotes/avulsas dos lotes foram derivados com o fator do tipo atual
                em_uso = repo.count_lotes(categoria_id)
                if em_uso:
                    raise CategoriaEmUsoError(categoria_id, em_uso, acao="mudar de tipo")
            repo.update(categoria_id, novo_nome, novo_tipo)
    except sqlite3.IntegrityError as e:
        raise NomeDuplicadoError("categoria", nome) from e
    log_database_operation("categorias", "UPDATE", 1, categoria_id=categoria_id)
    return Categoria(id=categoria_id, nome=novo_nome, tipo_unidade=novo_tipo)


def excluir_categoria(banco: Banco, categoria_id: int) -> None:
    with banco.transacao() as c:
        repo = CategoriaRepo(c)
        if repo.get(categoria_id) is None:
            raise CategoriaNaoEncontradaError(categoria_id)
        em_uso = repo.count_lotes(categoria_id)
        if em_uso:
            raise CategoriaEmUsoError(categoria_id, em_uso)
        repo.delete(categoria_id)
    log_database_operation("categorias", "DELETE", 1, categoria_id=categoria_id)


def listar_categorias(banco: Banco) -> List[Categoria]:
    with banco.conexao() as c:
        return CategoriaRepo(c).get_all()


def obter_categoria_por_nome(banco: Banco, nome: str) -> Categoria:
    with banco.conexao() as c:
        cat = CategoriaRepo(c).get_by_nome(nome)
    if cat is None:
        raise CategoriaNaoEncontradaError(nome)
    return cat


# -------------------------
# Fornecedores
# -------------------------

def criar_fornecedor(banco: Banco, nome: str) -> Fornecedor:
    nome = _nome_obrigatorio(nome)
    try:
        with banco.transacao() as c:
            forn = FornecedorRepo(c).insert(nome)
    except sqlite3.IntegrityError as e:
        raise NomeDuplicadoError("fornecedor", nome) from e
    log_database_operation("fornecedores", "INSERT", 1, nome=nome)
    return forn


def editar_fornecedor(banco: Banco, fornecedor_id: int, nome: str) -> Fornecedor:
    nome = _nome_obrigatorio(nome)
    try:
        with banco.transacao() as c:
            if FornecedorRepo(c).update(fornecedor_id, nome) == 0:
                raise FornecedorNaoEncontradoError(fornecedor_id)
    except sqlite3.IntegrityError as e:
        raise NomeDuplicadoError("fornecedor", nome) from e
    log_database_operation("fornecedores", "UPDATE", 1, fornecedor_id=fornecedor_id)
    return Fornecedor(id=fornecedor_id, nome=nome)


def excluir_fornecedor(banco: Banco, fornecedor_id: int) -> None:
    try:
        with banco.transacao() as c:
            if FornecedorRepo(c).delete(fornecedor_id) == 0:
                raise FornecedorNaoEncontradoError(fornecedor_id)
    except sqlite3.IntegrityError as e:
        # um lote do fornecedor colidiria com o lote "sem fornecedor" do mesmo produto
        raise ConflitoError(
            f"Fornecedor {fornecedor_id} não pode ser excluído: há lotes sem fornecedor com o mesmo produto"
        ) from e
    log_database_operation("fornecedores", "DELETE", 1, fornecedor_id=fornecedor_id)


def listar_fornecedores(banco: Banco) -> List[Fornecedor]:
    with banco.conexao() as c:
        return FornecedorRepo(c).get_all()


def obter_ou_criar_fornecedor(banco: Banco, nome: str) -> Fornecedor:
    """Usado na importação de planilhas: fornecedor novo é cadastrado na hora."""
    nome = _nome_obrigatorio(nome)
    with banco.conexao() as c:
        forn = FornecedorRepo(c).get_by_nome(nome)
    if forn is not None:
        return forn
    return criar_fornecedor(banco, nome)
