"""
Hierarquia tipada de erros do controle de insumos.

Toda falha do núcleo é uma subclasse de ``EstoqueError`` com um atributo de
classe ``code`` (legível por máquina) e os dados da falha como atributos, para
que a camada de entrada (CLI, rotas) trate por tipo e nunca por mensagem.

    EstoqueError
    |
    +-- NaoEncontradoError
    |   +-- LoteNaoEncontradoError
    |   +-- SessaoNaoEncontradaError
    |   +-- CategoriaNaoEncontradaError
    |   +-- FornecedorNaoEncontradoError
    |
    +-- ValidacaoError
    +-- EstoqueInsuficienteError
    |
    +-- ConflitoError
        +-- NomeDuplicadoError
        +-- CategoriaEmUsoError
        +-- SessaoJaFinalizadaError

Erros inesperados de persistência (``sqlite3.Error``) não são traduzidos:
sobem como estão.
"""

from __future__ import annotations

from typing import Any, Optional


class EstoqueError(Exception):
    """Base de todos os erros de domínio."""

    code: str = "ESTOQUE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        data = {k: v for k, v in vars(self).items() if k != "message"}
        return {"code": self.code, "message": self.message, **data}


# -------------------------
# Não encontrado
# -------------------------

class NaoEncontradoError(EstoqueError):
    code = "NOT_FOUND"


class LoteNaoEncontradoError(NaoEncontradoError):
    code = "LOT_NOT_FOUND"

    def __init__(self, lote_id: Any):
        self.lote_id = lote_id
        super().__init__(f"Lote {lote_id} não encontrado")


class SessaoNaoEncontradaError(NaoEncontradoError):
    code = "SESSION_NOT_FOUND"

    def __init__(self, sessao_id: Any):
        self.sessao_id = sessao_id
        super().__init__(f"Sessão de produção {sessao_id} não encontrada")


class CategoriaNaoEncontradaError(NaoEncontradoError):
    code = "CATEGORY_NOT_FOUND"

    def __init__(self, categoria: Any):
        self.categoria = categoria
        super().__init__(f"Categoria {categoria} não encontrada")


class FornecedorNaoEncontradoError(NaoEncontradoError):
    code = "SUPPLIER_NOT_FOUND"

    def __init__(self, fornecedor: Any):
        self.fornecedor = fornecedor
        super().__init__(f"Fornecedor {fornecedor} não encontrado")


# -------------------------
# Validação / saldo
# -------------------------

class ValidacaoError(EstoqueError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, campo: Optional[str] = None):
        self.campo = campo
        super().__init__(message)


class EstoqueInsuficienteError(EstoqueError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, lote_id: int, solicitado: int, disponivel: int):
        self.lote_id = lote_id
        self.solicitado = solicitado
        self.disponivel = disponivel
        super().__init__(
            f"Estoque insuficiente no lote {lote_id}: "
            f"solicitado {solicitado}, disponível {disponivel}"
        )


# -------------------------
# Conflitos
# -------------------------

class ConflitoError(EstoqueError):
    code = "CONFLICT"


class NomeDuplicadoError(ConflitoError):
    code = "DUPLICATE_NAME"

    def __init__(self, entidade: str, nome: str):
        self.entidade = entidade
        self.nome = nome
        super().__init__(f"Já existe {entidade} com o nome '{nome}'")


class CategoriaEmUsoError(ConflitoError):
    code = "CATEGORY_IN_USE"

    def __init__(self, categoria_id: int, lotes: int, acao: str = "excluída"):
        self.categoria_id = categoria_id
        self.lotes = lotes
        super().__init__(
            f"Categoria {categoria_id} está em uso por {lotes} lote(s) e não pode ser {acao}"
        )


class SessaoJaFinalizadaError(ConflitoError):
    code = "SESSION_ALREADY_CLOSED"

    def __init__(self, sessao_id: int):
        self.sessao_id = sessao_id
        super().__init__(f"Sessão de produção {sessao_id} já foi finalizada")
