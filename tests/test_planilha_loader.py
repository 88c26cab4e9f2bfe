"""
Testes do loader de planilhas de recebimento e da importação em lote.
"""

import pandas as pd

from insumos.adapters.planilha_loader import _normalize_columns, load_entradas_from_xlsx
from insumos.usecases import cadastros, relatorios
from insumos.usecases.registrar_entrada import run_entrada_lote


def _xlsx(tmp_path, dados, nome="recebimentos.xlsx"):
    path = tmp_path / nome
    pd.DataFrame(dados).to_excel(path, index=False)
    return str(path)


def test_normalize_columns_aliases():
    df = pd.DataFrame(columns=["Produto", "Fornecedor", "Qtd Pacotes", "Avulsas",
                               "Custo por pacote", "Estoque mínimo", "Data de entrada", "Obs"])
    cols = list(_normalize_columns(df).columns)
    assert cols == ["produto", "fornecedor", "pacotes", "unidades_avulsas",
                    "custo_por_pacote", "estoque_minimo", "data_entrada", "obs"]


def test_load_entradas_from_xlsx(tmp_path):
    path = _xlsx(tmp_path, {
        "Produto": ["Etiqueta X", "Rolo 40x25"],
        "Fornecedor": ["Gráfica Central", None],
        "Categoria": ["Cartão térmico", "Rolo BOPP"],
        "Pacotes": ["2", "4"],
        "Custo": ["92,50", "30"],
        "Data de entrada": ["15/01/2025", "2025-01-20"],
    })
    rows = load_entradas_from_xlsx(path)
    assert len(rows) == 2
    assert rows[0] == {
        "produto": "Etiqueta X",
        "fornecedor": "Gráfica Central",
        "categoria": "Cartão térmico",
        "pacotes": "2",
        "unidades_avulsas": None,
        "custo_por_pacote": "92,50",
        "estoque_minimo": None,
        "data_entrada": "2025-01-15",
        "linha": 2,
    }
    assert rows[1]["fornecedor"] is None
    assert rows[1]["data_entrada"] == "2025-01-20"
    assert rows[1]["linha"] == 3


def test_run_entrada_lote(banco, tmp_path, cat_cartao, cat_rolo):
    path = _xlsx(tmp_path, {
        "Produto": ["Etiqueta X", "Etiqueta Y", "Rolo 40x25", "Etiqueta X"],
        "Fornecedor": ["Gráfica Central", "Gráfica Central", None, "Gráfica Central"],
        "Categoria": ["Cartão térmico", "Inexistente", "Rolo BOPP", "Cartão térmico"],
        "Pacotes": ["1", "1", "-2", "0"],
        "Avulsas": [None, None, None, "2500"],
        "Custo": ["100", "100", "30", "110"],
        "Data": ["2025-01-15", "2025-01-15", "2025-01-15", "2025-01-16"],
    })
    res = run_entrada_lote(banco, path)

    assert res["tipo"] == "entrada"
    assert res["total"] == 4
    assert res["sucessos"] == 2
    assert [e["linha"] for e in res["erros"]] == [3, 4]
    assert "Inexistente" in res["erros"][0]["mensagem"]

    # fornecedor novo cadastrado na hora; a 4ª linha mesclou no mesmo lote
    [forn] = cadastros.listar_fornecedores(banco)
    assert forn.nome == "Gráfica Central"
    page = relatorios.listar_lotes(banco)
    por_produto = {i["produto"]: i for i in page["itens"]}
    assert set(por_produto) == {"Etiqueta X"}
    x = por_produto["Etiqueta X"]
    assert x["fornecedor_nome"] == "Gráfica Central"
    assert (x["pacotes"], x["unidades_avulsas"], x["total_unidades"]) == (1, 2500, 7500)
    assert x["custo_por_pacote"] == 110.0
    assert x["ultima_entrada"] == "2025-01-16"
