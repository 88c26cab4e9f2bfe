# insumos/usecases/relatorios.py
"""
Relatórios e consultas de leitura:
- lotes (paginado, com nomes de fornecedor/categoria)
- saídas (paginado, mais recentes primeiro)
- estatísticas do painel (unidades, valor em estoque, itens críticos)
- lotes críticos (para o aviso de estoque baixo)
- sessões de produção com indicadores de produtividade
- snapshot consolidado para consultas em linguagem natural
"""

from __future__ import annotations

from math import ceil
from typing import Any, Dict, List, Optional

from insumos.config import DEFAULTS
from insumos.domain.conversao import custo_unidades, tipo_unidade_de
from insumos.domain.models import StatusSessao, para_data
from insumos.domain.producao import indicadores_sessao
from insumos.infra.banco import Banco
from insumos.infra.logger import log_system_event
from insumos.infra.repositories import LoteRepo, SaidaRepo, UsoProducaoRepo


# ----------------------
# util
# ----------------------

def _pagina(itens: List[Dict[str, Any]], total: int, pagina: int, por_pagina: int) -> Dict[str, Any]:
    pagina = max(int(pagina), 1)
    por_pagina = max(int(por_pagina), 1)
    return {
        "itens": itens,
        "pagina": pagina,
        "por_pagina": por_pagina,
        "total": total,
        "paginas": max(ceil(total / por_pagina), 1),
    }


def _com_valor(lote: Dict[str, Any]) -> Dict[str, Any]:
    tipo = tipo_unidade_de(lote.get("tipo_unidade"))
    lote["valor_estoque"] = custo_unidades(tipo, lote["total_unidades"], lote["custo_por_pacote"])
    lote["critico"] = bool(lote["estoque_minimo"] > 0 and lote["total_unidades"] <= lote["estoque_minimo"])
    return lote


def _com_indicadores(sessao: Dict[str, Any]) -> Dict[str, Any]:
    if sessao.get("data_fim"):
        sessao.update(
            indicadores_sessao(
                para_data(sessao["data_inicio"]),
                para_data(sessao["data_fim"]),
                sessao["custo_por_pacote"],
                sessao.get("etiquetas_produzidas"),
            )
        )
    else:
        sessao.update({"dias_uteis": None, "custo_por_dia": None, "etiquetas_por_dia": None})
    return sessao


# ----------------------
# 1) Lotes e saídas
# ----------------------

def listar_lotes(banco: Banco, pagina: int = 1, por_pagina: int = DEFAULTS.itens_por_pagina) -> Dict[str, Any]:
    """Página de lotes com nomes de fornecedor e categoria, valor e flag de crítico."""
    with banco.conexao() as c:
        itens, total = LoteRepo(c).page_detalhe(pagina, por_pagina)
    return _pagina([_com_valor(i) for i in itens], total, pagina, por_pagina)


def listar_saidas(banco: Banco, pagina: int = 1, por_pagina: int = DEFAULTS.itens_por_pagina) -> Dict[str, Any]:
    with banco.conexao() as c:
        itens, total = SaidaRepo(c).page_detalhe(pagina, por_pagina)
    return _pagina(itens, total, pagina, por_pagina)


# ----------------------
# 2) Painel
# ----------------------

def estatisticas(banco: Banco) -> Dict[str, Any]:
    """
    Totais do painel:
        - total_lotes
        - total_unidades: soma dos saldos
        - valor_total: soma do custo do saldo de cada lote
        - itens_criticos: lotes com mínimo > 0 e saldo <= mínimo
    """
    with banco.conexao() as c:
        lotes = LoteRepo(c).get_all()
    out = {
        "total_lotes": len(lotes),
        "total_unidades": sum(l.total_unidades for l in lotes),
        "valor_total": sum(l.valor_em_estoque for l in lotes),
        "itens_criticos": sum(1 for l in lotes if l.critico),
    }
    log_system_event("estatisticas", out)
    return out


def lotes_criticos(banco: Banco) -> List[Dict[str, Any]]:
    """Lotes abaixo do mínimo: produto e saldo para o aviso de estoque baixo."""
    with banco.conexao() as c:
        return LoteRepo(c).criticos()


# ----------------------
# 3) Produção
# ----------------------

def listar_sessoes(banco: Banco, status: Optional[StatusSessao] = None) -> List[Dict[str, Any]]:
    """Sessões de produção; as finalizadas trazem dias úteis, custo/dia e etiquetas/dia."""
    with banco.conexao() as c:
        sessoes = UsoProducaoRepo(c).list_detalhe(status)
    return [_com_indicadores(s) for s in sessoes]


def sessoes_finalizadas(banco: Banco) -> List[Dict[str, Any]]:
    return listar_sessoes(banco, StatusSessao.FINALIZADA)


# ----------------------
# 4) Snapshot para consultas
# ----------------------

def snapshot_consulta(banco: Banco, limite_saidas: int = DEFAULTS.limite_saidas_recentes) -> Dict[str, Any]:
    """Fotografia do estoque usada como contexto pela camada de consulta."""
    with banco.conexao() as c:
        lotes = LoteRepo(c).list_detalhe()
        saidas, _ = SaidaRepo(c).page_detalhe(1, limite_saidas)
    return {
        "lotes": [_com_valor(l) for l in lotes],
        "saidas_recentes": saidas,
        "sessoes_finalizadas": sessoes_finalizadas(banco),
        "estatisticas": estatisticas(banco),
    }
