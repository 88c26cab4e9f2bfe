# insumos/adapters/planilha_loader.py
"""
Loader para planilhas (XLSX) de recebimento de insumos.

- lê a planilha com pandas, tudo como texto;
- normaliza cabeçalhos (acentos, variações, sinônimos);
- devolve uma lista de dicionários com as chaves de ``EntradaInput`` mais
  ``fornecedor`` e ``categoria`` por nome.

Não converte quantidades nem valores: isso fica com ``EntradaInput.from_dict``,
que sabe reportar o campo inválido. Datas vão para ISO quando possível.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import pandas as pd


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Minúsculas, sem acentos, só alfanuméricos separados por espaço."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    return re.sub(r"\s+", " ", s).strip()


def _safe_get(row, key):
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    val = str(val).strip()
    return val or None


def _to_date_iso(val: Any) -> Optional[str]:
    """Data ISO (YYYY-MM-DD); texto irreconhecível segue como veio."""
    if val is None:
        return None
    d = pd.to_datetime(val, dayfirst=not re.match(r"^\d{4}-", val), errors="coerce")
    if pd.isna(d):
        return val
    return d.date().isoformat()


_ALIASES = {
    "produto": "produto",
    "item": "produto",
    "descricao": "produto",
    "nome": "produto",
    "nome do produto": "produto",

    "fornecedor": "fornecedor",
    "fabricante": "fornecedor",

    "categoria": "categoria",
    "tipo": "categoria",

    "pacotes": "pacotes",
    "pacote": "pacotes",
    "qtd pacotes": "pacotes",
    "quantidade": "pacotes",
    "qtde": "pacotes",
    "qtd": "pacotes",

    "unidades avulsas": "unidades_avulsas",
    "avulsas": "unidades_avulsas",
    "unidades": "unidades_avulsas",

    "custo": "custo_por_pacote",
    "custo por pacote": "custo_por_pacote",
    "custo pacote": "custo_por_pacote",
    "valor": "custo_por_pacote",
    "preco": "custo_por_pacote",

    "estoque minimo": "estoque_minimo",
    "minimo": "estoque_minimo",
    "qtd minima": "estoque_minimo",

    "data": "data_entrada",
    "data entrada": "data_entrada",
    "data de entrada": "data_entrada",
    "entrada": "data_entrada",
}

CAMPOS = (
    "produto",
    "fornecedor",
    "categoria",
    "pacotes",
    "unidades_avulsas",
    "custo_por_pacote",
    "estoque_minimo",
    "data_entrada",
)


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = _ALIASES.get(key, key.replace(" ", "_"))
    return df.rename(columns=new_cols)


# ---------------------------
# loader público (XLSX)
# ---------------------------

def load_entradas_from_xlsx(path: str) -> List[Dict[str, Any]]:
    """Lê XLSX de recebimentos.

    Chaves por linha: produto, fornecedor, categoria, pacotes,
    unidades_avulsas, custo_por_pacote, estoque_minimo (texto ou None) e
    data_entrada (ISO ou None), além de ``linha`` (número da linha na
    planilha, contando o cabeçalho). Linhas totalmente vazias são ignoradas.
    """
    df = pd.read_excel(path, dtype="string")
    df = _normalize_columns(df)
    out: List[Dict[str, Any]] = []
    for idx, row in df.iterrows():
        rec = {campo: _safe_get(row, campo) for campo in CAMPOS}
        if all(v is None for v in rec.values()):
            continue
        rec["data_entrada"] = _to_date_iso(rec["data_entrada"])
        rec["linha"] = int(idx) + 2
        out.append(rec)
    return out
