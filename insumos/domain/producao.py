"""
Indicadores de produtividade das sessões de produção.

Os valores aqui calculados não são persistidos: são derivados na leitura a
partir das datas da sessão, do custo do pacote e das etiquetas produzidas.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Optional

_DOMINGO = 6  # date.weekday()


def dias_uteis(inicio: date, fim: date) -> int:
    """Conta os dias corridos de ``inicio`` a ``fim`` (inclusive), sem domingos.

    Sábados contam. O resultado nunca é menor que 1, mesmo com ``fim``
    anterior a ``inicio``.

    Args:
        inicio: Data de início da sessão.
        fim: Data de encerramento da sessão.

    Returns:
        Quantidade de dias trabalhados, com piso de 1.
    """
    total = (fim - inicio).days + 1
    if total <= 0:
        return 1
    semanas, resto = divmod(total, 7)
    domingos = semanas
    for i in range(resto):
        if (inicio + timedelta(days=semanas * 7 + i)).weekday() == _DOMINGO:
            domingos += 1
    return max(total - domingos, 1)


def indicadores_sessao(
    inicio: date,
    fim: date,
    custo_por_pacote: float,
    etiquetas_produzidas: Optional[int],
) -> Dict[str, Optional[float]]:
    """Calcula dias trabalhados, custo por dia e etiquetas por dia."""
    dias = dias_uteis(inicio, fim)
    etiquetas_por_dia = None
    if etiquetas_produzidas is not None:
        etiquetas_por_dia = float(etiquetas_produzidas) / dias
    return {
        "dias_uteis": dias,
        "custo_por_dia": float(custo_por_pacote) / dias,
        "etiquetas_por_dia": etiquetas_por_dia,
    }
