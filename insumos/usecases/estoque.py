# insumos/usecases/estoque.py
"""
UC: Livro de estoque (recebimento, baixa, exclusão e ajuste de lotes).

Regras mantidas a cada gravação:
- total = pacotes * fator(categoria) + avulsas; avulsas = 0 para rolo/embalagem.
- total nunca fica negativo: baixa maior que o saldo é recusada.
- um lote por (produto, fornecedor); recebimento repetido mescla no existente.

Obs.:
- (pacotes, avulsas) são sempre derivados do total, inclusive no primeiro
  recebimento, nunca copiados da entrada.
- Em um recebimento, custo, mínimo, data e categoria informados sobrescrevem
  os anteriores (a última entrada vence).
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Optional

from insumos.domain.conversao import custo_unidades, de_total, para_total
from insumos.domain.erros import (
    CategoriaNaoEncontradaError,
    EstoqueInsuficienteError,
    FornecedorNaoEncontradoError,
    LoteNaoEncontradoError,
    ValidacaoError,
)
from insumos.domain.models import Lote
from insumos.infra.banco import Banco
from insumos.infra.logger import (
    log_database_operation,
    log_entrada,
    log_system_event,
    log_transaction,
)
from insumos.infra.repositories import CategoriaRepo, FornecedorRepo, LoteRepo


@dataclass
class BaixaResultado:
    """O que a baixa devolve para quem vai registrar a saída/sessão."""
    lote: Lote
    novo_total: int
    custo: float


class Estoque:
    def __init__(self, banco: Banco):
        self.banco = banco

    # -------------------------
    # leitura
    # -------------------------

    def obter(self, lote_id: int) -> Lote:
        with self.banco.conexao() as c:
            lote = LoteRepo(c).get(lote_id)
        if lote is None:
            raise LoteNaoEncontradoError(lote_id)
        return lote

    # -------------------------
    # recebimento
    # -------------------------

    def receber(
        self,
        produto: str,
        fornecedor_id: Optional[int],
        categoria_id: int,
        pacotes: int,
        unidades_avulsas: int,
        custo_por_pacote: float,
        estoque_minimo: int,
        data_entrada: date,
    ) -> Lote:
        """Soma a entrada ao lote (produto, fornecedor), criando-o se necessário."""
        dados = {
            "produto": produto,
            "fornecedor_id": fornecedor_id,
            "categoria_id": categoria_id,
            "pacotes": pacotes,
            "unidades_avulsas": unidades_avulsas,
        }
        log_system_event("entrada_start", dados)
        try:
            if pacotes < 0 or unidades_avulsas < 0:
                raise ValidacaoError("Quantidades de entrada não podem ser negativas", campo="pacotes")

            with self.banco.transacao() as c:
                categoria = CategoriaRepo(c).get(categoria_id)
                if categoria is None:
                    raise CategoriaNaoEncontradaError(categoria_id)
                if fornecedor_id is not None and FornecedorRepo(c).get(fornecedor_id) is None:
                    raise FornecedorNaoEncontradoError(fornecedor_id)

                tipo = categoria.tipo
                adicionadas = para_total(tipo, pacotes, unidades_avulsas)
                repo = LoteRepo(c)
                existente = repo.find(produto, fornecedor_id)
                novo_total = adicionadas + (existente.total_unidades if existente else 0)
                novos_pacotes, novas_avulsas = de_total(tipo, novo_total)

                row = {
                    "produto": produto,
                    "fornecedor_id": fornecedor_id,
                    "categoria_id": categoria_id,
                    "pacotes": novos_pacotes,
                    "unidades_avulsas": novas_avulsas,
                    "total_unidades": novo_total,
                    "custo_por_pacote": float(custo_por_pacote),
                    "estoque_minimo": int(estoque_minimo),
                    "ultima_entrada": data_entrada,
                }
                if existente:
                    lote_id = existente.id
                    repo.update_entrada(lote_id, row)
                    log_database_operation("estoque", "UPDATE", 1, lote_id=lote_id)
                    acao = "merge"
                else:
                    lote_id = repo.insert(row)
                    log_database_operation("estoque", "INSERT", 1, lote_id=lote_id)
                    acao = "insert"
                lote = repo.get(lote_id)

            log_entrada(acao, lote.id, adicionadas, produto=produto, novo_total=lote.total_unidades)
            log_transaction("entrada", dados, result={"lote_id": lote.id, "total": lote.total_unidades})
            return lote
        except Exception as e:
            log_transaction("entrada", dados, error=str(e))
            log_system_event("entrada_error", {"error": str(e)}, level="error")
            raise

    # -------------------------
    # baixa
    # -------------------------

    def baixar(self, conn: sqlite3.Connection, lote_id: int, quantidade: int) -> BaixaResultado:
        """Desconta ``quantidade`` unidades do lote dentro da transação ``conn``.

        Deve ser chamada com o lote já travado (``Banco.transacao_lote``);
        a gravação do registro dependente (saída ou sessão) vai na mesma
        transação.
        """
        if quantidade is None or int(quantidade) <= 0:
            raise ValidacaoError("A quantidade da baixa deve ser maior que zero", campo="quantidade")
        quantidade = int(quantidade)

        repo = LoteRepo(conn)
        lote = repo.get(lote_id)
        if lote is None:
            raise LoteNaoEncontradoError(lote_id)
        if quantidade > lote.total_unidades:
            raise EstoqueInsuficienteError(lote_id, quantidade, lote.total_unidades)

        custo = custo_unidades(lote.tipo, quantidade, lote.custo_por_pacote)
        novo_total = lote.total_unidades - quantidade
        pacotes, avulsas = de_total(lote.tipo, novo_total)
        repo.update_quantidades(lote_id, pacotes, avulsas, novo_total)
        log_database_operation("estoque", "UPDATE", 1, lote_id=lote_id, baixa=quantidade)

        lote.pacotes, lote.unidades_avulsas, lote.total_unidades = pacotes, avulsas, novo_total
        return BaixaResultado(lote=lote, novo_total=novo_total, custo=custo)

    # -------------------------
    # exclusão / ajuste
    # -------------------------

    def excluir(self, lote_id: int) -> None:
        """Remove o lote; saídas e sessões do lote vão junto (cascade)."""
        with self.banco.transacao_lote(lote_id) as c:
            if LoteRepo(c).delete(lote_id) == 0:
                raise LoteNaoEncontradoError(lote_id)
        log_database_operation("estoque", "DELETE", 1, lote_id=lote_id)
        log_system_event("lote_excluido", {"lote_id": lote_id})

    def atualizar(
        self,
        lote_id: int,
        custo_por_pacote: Optional[float] = None,
        estoque_minimo: Optional[int] = None,
    ) -> Lote:
        """Ajusta custo e mínimo; quantidades só mudam por entrada ou baixa."""
        with self.banco.transacao_lote(lote_id) as c:
            repo = LoteRepo(c)
            lote = repo.get(lote_id)
            if lote is None:
                raise LoteNaoEncontradoError(lote_id)
            custo = lote.custo_por_pacote if custo_por_pacote is None else float(custo_por_pacote)
            minimo = lote.estoque_minimo if estoque_minimo is None else int(estoque_minimo)
            if custo < 0 or minimo < 0:
                raise ValidacaoError("Custo e estoque mínimo não podem ser negativos")
            repo.update_parametros(lote_id, custo, minimo)
            lote = repo.get(lote_id)
        log_database_operation("estoque", "UPDATE", 1, lote_id=lote_id, custo=custo, minimo=minimo)
        return lote
