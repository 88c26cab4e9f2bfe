"""
Utilidades de parsing para valores vindos de fora (CLI, planilhas, JSON).

As funções aceitam os formatos encontrados nas planilhas de entrada: datas
em ISO ou no padrão brasileiro, números com vírgula decimal, textos com
espaços sobrando. Valores vazios viram ``None``; valores malformados
levantam ``ValidacaoError`` com o nome do campo.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from insumos.domain.erros import ValidacaoError

_NUM_RE = re.compile(r"^[-+]?\d+(?:[.,]\d+)?$")
_MILHAR_RE = re.compile(r"^[-+]?\d{1,3}(?:\.\d{3})+(?:,\d+)?$")

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d/%m/%y")


def normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def parse_decimal(val: Any, campo: str = "valor") -> Optional[float]:
    """Interpreta um número com ponto ou vírgula decimal.

    Exemplos:
        "100"      → 100.0
        "92,5"     → 92.5
        "1.250,00" → 1250.0
    """
    if val is None:
        return None
    if isinstance(val, bool):
        raise ValidacaoError(f"{campo}: valor numérico inválido", campo=campo)
    if isinstance(val, (int, float)):
        if isinstance(val, float) and not math.isfinite(val):
            raise ValidacaoError(f"{campo}: valor numérico inválido ({val!r})", campo=campo)
        return float(val)
    s = str(val).strip()
    if not s:
        return None
    if _MILHAR_RE.match(s):
        s = s.replace(".", "")
    if not _NUM_RE.match(s):
        raise ValidacaoError(f"{campo}: valor numérico inválido ({val!r})", campo=campo)
    return float(s.replace(",", "."))


def parse_inteiro(val: Any, campo: str = "valor") -> Optional[int]:
    """Inteiro a partir de int, float inteiro ("3.0" de planilha) ou texto."""
    num = parse_decimal(val, campo)
    if num is None:
        return None
    if num != int(num):
        raise ValidacaoError(f"{campo}: deve ser um número inteiro ({val!r})", campo=campo)
    return int(num)


def parse_data(val: Any, campo: str = "data") -> Optional[date]:
    """Data a partir de ``date``/``datetime`` ou texto (YYYY-MM-DD, DD/MM/AAAA)."""
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    s = str(val).strip()
    if not s:
        return None
    # planilhas costumam trazer "2025-01-15 00:00:00"
    s = s.split(" ")[0].split("T")[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValidacaoError(f"{campo}: data inválida ({val!r})", campo=campo)
