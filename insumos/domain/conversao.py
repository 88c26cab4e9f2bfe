"""
Conversão entre pacotes e unidades de etiqueta.

Cada categoria define como um pacote se decompõe em unidades:

- ``cartao``: um pacote de cartões tem 5000 etiquetas; o estoque guarda
  pacotes inteiros mais um resto de etiquetas avulsas.
- ``rolo`` / ``embalagem``: um pacote é uma unidade; não existe resto.

Todas as funções são puras: dependem apenas das entradas e não tocam em
estado externo, o que as torna fáceis de testar isoladamente.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union

from insumos.config import UNIDADES_POR_PACOTE_CARTAO


class TipoUnidade(str, Enum):
    """Aritmética de conversão de uma categoria."""
    CARTAO = "cartao"
    UNITARIO = "unitario"


# Rótulos aceitos no cadastro de categorias
TIPOS_CATEGORIA = ("cartao", "rolo", "embalagem")

_TIPO_POR_ROTULO = {
    "cartao": TipoUnidade.CARTAO,
    "rolo": TipoUnidade.UNITARIO,
    "embalagem": TipoUnidade.UNITARIO,
}


def tipo_unidade_de(rotulo: Optional[str]) -> TipoUnidade:
    """Resolve o rótulo da categoria para o tipo de conversão.

    Lote sem categoria (ou com rótulo desconhecido) é tratado como cartão.
    """
    if rotulo is None:
        return TipoUnidade.CARTAO
    return _TIPO_POR_ROTULO.get(str(rotulo).strip().lower(), TipoUnidade.CARTAO)


def fator_conversao(tipo: TipoUnidade) -> int:
    """Unidades por pacote."""
    return UNIDADES_POR_PACOTE_CARTAO if tipo == TipoUnidade.CARTAO else 1


def para_total(tipo: TipoUnidade, pacotes: int, unidades_avulsas: int = 0) -> int:
    """Converte (pacotes, avulsas) para o total de unidades.

    Para rolo/embalagem as avulsas são ignoradas (zeradas), sem erro.
    """
    if tipo == TipoUnidade.CARTAO:
        return int(pacotes) * UNIDADES_POR_PACOTE_CARTAO + int(unidades_avulsas or 0)
    return int(pacotes)


def de_total(tipo: TipoUnidade, total_unidades: int) -> Tuple[int, int]:
    """Decompõe o total de unidades em (pacotes, avulsas)."""
    total = int(total_unidades)
    if tipo == TipoUnidade.CARTAO:
        return divmod(total, UNIDADES_POR_PACOTE_CARTAO)
    return total, 0


def custo_unidades(
    tipo: TipoUnidade,
    quantidade: Union[int, float],
    custo_por_pacote: Union[int, float],
) -> float:
    """Custo de ``quantidade`` unidades ao preço de ``custo_por_pacote``.

    Cartões são cobrados pela fração de pacote consumida; rolos e embalagens
    custam um pacote inteiro por unidade.
    """
    if not quantidade:
        return 0.0
    if tipo == TipoUnidade.CARTAO:
        return (float(quantidade) / UNIDADES_POR_PACOTE_CARTAO) * float(custo_por_pacote)
    return float(quantidade) * float(custo_por_pacote)
