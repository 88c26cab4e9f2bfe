# insumos/usecases/registrar_saida.py
"""
UC: Registrar SAÍDA (baixa de N unidades de um lote).

A baixa do lote e a gravação da saída acontecem na mesma transação, com o
lote travado: ou as duas coisas ficam gravadas, ou nenhuma.

Obs.:
- O nome do produto é copiado para a saída no momento da baixa e não muda
  se o lote for renomeado depois.
- O custo gravado é o custo das unidades baixadas ao preço atual do lote.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from insumos.domain.models import Saida
from insumos.infra.banco import Banco
from insumos.infra.logger import (
    log_database_operation,
    log_saida,
    log_system_event,
    log_transaction,
)
from insumos.infra.repositories import SaidaRepo
from insumos.usecases.estoque import Estoque


class RegistrarSaida:
    def __init__(self, banco: Banco):
        self.banco = banco
        self.estoque = Estoque(banco)

    def executar(self, lote_id: int, data: date, quantidade: int, destino: Optional[str] = None) -> Saida:
        dados = {"lote_id": lote_id, "data": str(data), "quantidade": quantidade, "destino": destino}
        log_system_event("saida_start", dados)
        try:
            with self.banco.transacao_lote(lote_id) as c:
                baixa = self.estoque.baixar(c, lote_id, quantidade)
                repo = SaidaRepo(c)
                saida_id = repo.insert(
                    {
                        "data": data,
                        "lote_id": lote_id,
                        "produto_nome": baixa.lote.produto,
                        "total_unidades": int(quantidade),
                        "custo_total": baixa.custo,
                        "destino": destino,
                    }
                )
                log_database_operation("saidas", "INSERT", 1, saida_id=saida_id, lote_id=lote_id)
                saida = repo.get(saida_id)

            log_saida("insert", lote_id, quantidade, saida_id=saida.id, novo_total=baixa.novo_total)
            log_transaction("saida", dados, result={"saida_id": saida.id, "custo": saida.custo_total})
            return saida
        except Exception as e:
            log_transaction("saida", dados, error=str(e))
            log_system_event("saida_error", {"lote_id": lote_id, "error": str(e)}, level="error")
            raise
