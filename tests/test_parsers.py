from datetime import date, datetime

import pytest

from insumos.adapters.parsers import normalize_str, parse_data, parse_decimal, parse_inteiro
from insumos.domain.erros import ValidacaoError


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("100", 100.0),
        ("92,5", 92.5),
        ("92.5", 92.5),
        ("1.250,00", 1250.0),
        (7, 7.0),
        ("", None),
        (None, None),
    ],
)
def test_parse_decimal(txt, esperado):
    assert parse_decimal(txt) == esperado


@pytest.mark.parametrize("txt", ["abc", "1,2,3", "10 UN"])
def test_parse_decimal_invalido(txt):
    with pytest.raises(ValidacaoError) as exc:
        parse_decimal(txt, "custo_por_pacote")
    assert exc.value.campo == "custo_por_pacote"


@pytest.mark.parametrize("num", [float("nan"), float("inf"), float("-inf")])
def test_numero_nao_finito_e_invalido(num):
    with pytest.raises(ValidacaoError) as exc:
        parse_inteiro(num, "pacotes")
    assert exc.value.campo == "pacotes"
    with pytest.raises(ValidacaoError):
        parse_decimal(num, "custo_por_pacote")


def test_parse_inteiro():
    assert parse_inteiro("3") == 3
    assert parse_inteiro("3.0") == 3
    assert parse_inteiro(None) is None
    with pytest.raises(ValidacaoError):
        parse_inteiro("2,5", "pacotes")


@pytest.mark.parametrize(
    "val,esperado",
    [
        ("2025-01-15", date(2025, 1, 15)),
        ("15/01/2025", date(2025, 1, 15)),
        ("2025-01-15 00:00:00", date(2025, 1, 15)),
        (datetime(2025, 1, 15, 8, 30), date(2025, 1, 15)),
        (date(2025, 1, 15), date(2025, 1, 15)),
        ("", None),
        (None, None),
    ],
)
def test_parse_data(val, esperado):
    assert parse_data(val) == esperado


def test_parse_data_invalida():
    with pytest.raises(ValidacaoError) as exc:
        parse_data("31/02/2025", "data_fim")
    assert exc.value.campo == "data_fim"


def test_normalize_str():
    assert normalize_str("  Etiqueta X ") == "Etiqueta X"
    assert normalize_str("   ") is None
    assert normalize_str(None) is None
