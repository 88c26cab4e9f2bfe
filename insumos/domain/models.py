# insumos/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os repositórios devolvem estas dataclasses a partir das linhas do SQLite
  (``from_row``); as consultas de relatório devolvem dicionários simples.
- Datas são ``datetime.date``; no banco ficam como texto ISO (YYYY-MM-DD).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional

from insumos.domain.conversao import (
    TipoUnidade,
    custo_unidades,
    fator_conversao,
    tipo_unidade_de,
)


def para_data(val: Any) -> Optional[date]:
    if val is None or isinstance(val, date):
        return val
    return date.fromisoformat(str(val)[:10])


class StatusSessao(str, Enum):
    ABERTA = "aberta"
    FINALIZADA = "finalizada"


@dataclass
class Categoria:
    """Categoria de insumo; o rótulo define a conversão pacote/unidade."""
    id: int
    nome: str
    tipo_unidade: str  # 'cartao' | 'rolo' | 'embalagem'

    @property
    def tipo(self) -> TipoUnidade:
        return tipo_unidade_de(self.tipo_unidade)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Categoria":
        return cls(id=row["id"], nome=row["nome"], tipo_unidade=row["tipo_unidade"])


@dataclass
class Fornecedor:
    id: int
    nome: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Fornecedor":
        return cls(id=row["id"], nome=row["nome"])


@dataclass
class Lote:
    """Linha de estoque: uma combinação única de (produto, fornecedor)."""
    id: int
    produto: str
    fornecedor_id: Optional[int]
    categoria_id: Optional[int]
    pacotes: int
    unidades_avulsas: int
    total_unidades: int
    custo_por_pacote: float
    estoque_minimo: int
    ultima_entrada: Optional[date] = None
    tipo_unidade: Optional[str] = None  # rótulo da categoria (join)

    @property
    def tipo(self) -> TipoUnidade:
        return tipo_unidade_de(self.tipo_unidade)

    @property
    def fator(self) -> int:
        return fator_conversao(self.tipo)

    @property
    def valor_em_estoque(self) -> float:
        return custo_unidades(self.tipo, self.total_unidades, self.custo_por_pacote)

    @property
    def critico(self) -> bool:
        return self.estoque_minimo > 0 and self.total_unidades <= self.estoque_minimo

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Lote":
        keys = row.keys()
        return cls(
            id=row["id"],
            produto=row["produto"],
            fornecedor_id=row["fornecedor_id"],
            categoria_id=row["categoria_id"],
            pacotes=int(row["pacotes"]),
            unidades_avulsas=int(row["unidades_avulsas"]),
            total_unidades=int(row["total_unidades"]),
            custo_por_pacote=float(row["custo_por_pacote"]),
            estoque_minimo=int(row["estoque_minimo"]),
            ultima_entrada=para_data(row["ultima_entrada"]),
            tipo_unidade=row["tipo_unidade"] if "tipo_unidade" in keys else None,
        )


@dataclass
class Saida:
    """Registro imutável de baixa de estoque."""
    id: int
    data: date
    lote_id: int
    produto_nome: str
    total_unidades: int
    custo_total: float
    destino: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Saida":
        return cls(
            id=row["id"],
            data=para_data(row["data"]),
            lote_id=row["lote_id"],
            produto_nome=row["produto_nome"],
            total_unidades=int(row["total_unidades"]),
            custo_total=float(row["custo_total"]),
            destino=row["destino"],
        )


@dataclass
class UsoProducao:
    """Sessão de produção: uma unidade do lote em uso entre início e fim."""
    id: int
    lote_id: int
    produto_nome: str
    data_inicio: date
    data_fim: Optional[date] = None
    etiquetas_produzidas: Optional[int] = None  # None = não informado
    status: StatusSessao = StatusSessao.ABERTA

    @property
    def finalizada(self) -> bool:
        return self.status == StatusSessao.FINALIZADA

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UsoProducao":
        return cls(
            id=row["id"],
            lote_id=row["lote_id"],
            produto_nome=row["produto_nome"],
            data_inicio=para_data(row["data_inicio"]),
            data_fim=para_data(row["data_fim"]),
            etiquetas_produzidas=row["etiquetas_produzidas"],
            status=StatusSessao(row["status"]),
        )
