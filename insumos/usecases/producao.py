# insumos/usecases/producao.py
"""
UC: Sessões de produção (uso de um rolo/cartão na produção de etiquetas).

Estados: aberta -> finalizada (terminal). Não existe reabertura.

- iniciar(): trava o lote, baixa exatamente 1 unidade e abre a sessão, tudo
  na mesma transação. A unidade não volta ao estoque ao finalizar.
- finalizar(): grava data de fim e etiquetas produzidas (opcional); uma
  sessão já finalizada não pode ser finalizada de novo.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from insumos.domain.erros import (
    SessaoJaFinalizadaError,
    SessaoNaoEncontradaError,
    ValidacaoError,
)
from insumos.domain.models import UsoProducao
from insumos.infra.banco import Banco
from insumos.infra.logger import (
    log_database_operation,
    log_producao,
    log_system_event,
    log_transaction,
)
from insumos.infra.repositories import UsoProducaoRepo
from insumos.usecases.estoque import Estoque


class SessaoProducao:
    def __init__(self, banco: Banco):
        self.banco = banco
        self.estoque = Estoque(banco)

    def iniciar(self, lote_id: int, data_inicio: date) -> UsoProducao:
        dados = {"lote_id": lote_id, "data_inicio": str(data_inicio)}
        try:
            log_system_event("producao_inicio_start", dados)
            with self.banco.transacao_lote(lote_id) as c:
                baixa = self.estoque.baixar(c, lote_id, 1)
                repo = UsoProducaoRepo(c)
                sessao_id = repo.insert(
                    {"lote_id": lote_id, "produto_nome": baixa.lote.produto, "data_inicio": data_inicio}
                )
                log_database_operation("uso_producao", "INSERT", 1, sessao_id=sessao_id)
                sessao = repo.get(sessao_id)

            log_producao("inicio", lote_id, sessao_id=sessao.id, novo_total=baixa.novo_total)
            log_transaction("producao_inicio", dados, result={"sessao_id": sessao.id})
            return sessao
        except Exception as e:
            log_transaction("producao_inicio", dados, error=str(e))
            log_system_event("producao_inicio_error", {"lote_id": lote_id, "error": str(e)}, level="error")
            raise

    def finalizar(
        self,
        sessao_id: int,
        data_fim: Optional[date],
        etiquetas_produzidas: Optional[int] = None,
    ) -> UsoProducao:
        dados = {"sessao_id": sessao_id, "data_fim": str(data_fim), "etiquetas": etiquetas_produzidas}
        try:
            log_system_event("producao_fim_start", dados)
            if data_fim is None:
                raise ValidacaoError("Data de fim é obrigatória", campo="data_fim")
            if etiquetas_produzidas is not None and etiquetas_produzidas < 0:
                raise ValidacaoError("Etiquetas produzidas não pode ser negativo", campo="etiquetas_produzidas")

            with self.banco.transacao() as c:
                repo = UsoProducaoRepo(c)
                sessao = repo.get(sessao_id)
                if sessao is None:
                    raise SessaoNaoEncontradaError(sessao_id)
                if sessao.finalizada:
                    raise SessaoJaFinalizadaError(sessao_id)
                repo.finalizar(sessao_id, data_fim, etiquetas_produzidas)
                log_database_operation("uso_producao", "UPDATE", 1, sessao_id=sessao_id)
                sessao = repo.get(sessao_id)

            log_producao("fim", sessao.lote_id, quantidade=0, sessao_id=sessao_id,
                         etiquetas=etiquetas_produzidas)
            log_transaction("producao_fim", dados, result={"sessao_id": sessao_id})
            return sessao
        except Exception as e:
            log_transaction("producao_fim", dados, error=str(e))
            log_system_event("producao_fim_error", {"sessao_id": sessao_id, "error": str(e)}, level="error")
            raise
