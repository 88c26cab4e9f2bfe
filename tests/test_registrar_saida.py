import sqlite3
from datetime import date

import pytest

from insumos.domain.erros import EstoqueInsuficienteError, LoteNaoEncontradoError
from insumos.infra.repositories import SaidaRepo
from insumos.usecases import relatorios
from insumos.usecases.estoque import Estoque
from insumos.usecases.registrar_saida import RegistrarSaida


def test_fluxo_etiqueta_x(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1, custo=100.0, minimo=500)
    assert lote.total_unidades == 5000

    saida = RegistrarSaida(banco).executar(lote.id, date(2025, 1, 15), 4600, destino="Linha 1")
    assert saida.total_unidades == 4600
    assert saida.custo_total == pytest.approx(92.0)
    assert saida.produto_nome == "Etiqueta X"
    assert saida.data == date(2025, 1, 15)

    lote = Estoque(banco).obter(lote.id)
    assert (lote.pacotes, lote.unidades_avulsas, lote.total_unidades) == (0, 400, 400)
    assert lote.critico

    criticos = relatorios.lotes_criticos(banco)
    assert [(c["produto"], c["total_unidades"]) for c in criticos] == [("Etiqueta X", 400)]


def test_saldo_insuficiente_nao_altera_nada(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1)
    with pytest.raises(EstoqueInsuficienteError) as exc:
        RegistrarSaida(banco).executar(lote.id, date(2025, 1, 15), 5001)
    assert exc.value.solicitado == 5001
    assert exc.value.disponivel == 5000
    assert exc.value.to_dict()["code"] == "INSUFFICIENT_STOCK"
    assert Estoque(banco).obter(lote.id).total_unidades == 5000


def test_baixa_do_saldo_inteiro(banco, receber, cat_rolo):
    lote = receber("Rolo 40x25", cat_rolo, pacotes=2, custo=30.0)
    saida = RegistrarSaida(banco).executar(lote.id, date(2025, 1, 15), 2)
    assert saida.custo_total == pytest.approx(60.0)
    assert Estoque(banco).obter(lote.id).total_unidades == 0


def test_lote_inexistente(banco):
    with pytest.raises(LoteNaoEncontradoError):
        RegistrarSaida(banco).executar(42, date(2025, 1, 15), 1)


def test_falha_ao_gravar_saida_desfaz_baixa(banco, receber, cat_cartao, monkeypatch):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1, custo=100.0)

    def _falha(self, row):
        raise RuntimeError("disco cheio")

    monkeypatch.setattr(SaidaRepo, "insert", _falha)
    with pytest.raises(RuntimeError):
        RegistrarSaida(banco).executar(lote.id, date(2025, 1, 15), 100)

    assert Estoque(banco).obter(lote.id).total_unidades == 5000
    with banco.conexao() as c:
        assert c.execute("SELECT COUNT(*) FROM saidas").fetchone()[0] == 0


def test_nome_congelado_na_saida(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1)
    RegistrarSaida(banco).executar(lote.id, date(2025, 1, 15), 10)
    with banco.conexao() as c:
        c.execute("UPDATE estoque SET produto = 'Etiqueta Y' WHERE id = ?", (lote.id,))
    page = relatorios.listar_saidas(banco)
    assert page["itens"][0]["produto_nome"] == "Etiqueta X"


def test_saidas_sao_imutaveis_no_banco(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1)
    saida = RegistrarSaida(banco).executar(lote.id, date(2025, 1, 15), 10)
    with pytest.raises(sqlite3.IntegrityError):
        with banco.conexao() as c:
            c.execute("UPDATE saidas SET total_unidades = 1 WHERE id = ?", (saida.id,))
