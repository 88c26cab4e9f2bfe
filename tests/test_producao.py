from datetime import date

import pytest

from insumos.domain.erros import (
    ConflitoError,
    EstoqueInsuficienteError,
    SessaoJaFinalizadaError,
    SessaoNaoEncontradaError,
    ValidacaoError,
)
from insumos.domain.models import StatusSessao
from insumos.usecases import relatorios
from insumos.usecases.estoque import Estoque
from insumos.usecases.producao import SessaoProducao


@pytest.fixture
def lote_400(receber, cat_cartao):
    return receber("Etiqueta X", cat_cartao, avulsas=400, custo=120.0)


def test_iniciar_baixa_uma_unidade(banco, lote_400):
    sessao = SessaoProducao(banco).iniciar(lote_400.id, date(2025, 1, 6))
    assert sessao.status == StatusSessao.ABERTA
    assert sessao.produto_nome == "Etiqueta X"
    assert sessao.data_fim is None
    assert Estoque(banco).obter(lote_400.id).total_unidades == 399


def test_finalizar_e_indicadores(banco, lote_400):
    producao = SessaoProducao(banco)
    sessao = producao.iniciar(lote_400.id, date(2025, 1, 6))
    # segunda a domingo: 7 dias corridos, 6 trabalhados
    fechada = producao.finalizar(sessao.id, date(2025, 1, 12), 600)
    assert fechada.finalizada
    assert fechada.etiquetas_produzidas == 600

    # a unidade não volta ao estoque
    assert Estoque(banco).obter(lote_400.id).total_unidades == 399

    [linha] = relatorios.sessoes_finalizadas(banco)
    assert linha["dias_uteis"] == 6
    assert linha["etiquetas_por_dia"] == pytest.approx(100.0)
    assert linha["custo_por_dia"] == pytest.approx(20.0)


def test_finalizar_sem_etiquetas(banco, lote_400):
    producao = SessaoProducao(banco)
    sessao = producao.iniciar(lote_400.id, date(2025, 1, 6))
    producao.finalizar(sessao.id, date(2025, 1, 6))
    [linha] = relatorios.listar_sessoes(banco, StatusSessao.FINALIZADA)
    assert linha["dias_uteis"] == 1
    assert linha["etiquetas_por_dia"] is None


def test_fim_antes_do_inicio_conta_um_dia(banco, lote_400):
    producao = SessaoProducao(banco)
    sessao = producao.iniciar(lote_400.id, date(2025, 1, 10))
    producao.finalizar(sessao.id, date(2025, 1, 6), 50)
    [linha] = relatorios.sessoes_finalizadas(banco)
    assert linha["dias_uteis"] == 1


def test_finalizar_duas_vezes_e_conflito(banco, lote_400):
    producao = SessaoProducao(banco)
    sessao = producao.iniciar(lote_400.id, date(2025, 1, 6))
    producao.finalizar(sessao.id, date(2025, 1, 8), 100)
    with pytest.raises(SessaoJaFinalizadaError) as exc:
        producao.finalizar(sessao.id, date(2025, 1, 9), 200)
    assert isinstance(exc.value, ConflitoError)
    [linha] = relatorios.sessoes_finalizadas(banco)
    assert linha["etiquetas_produzidas"] == 100


def test_finalizar_sem_data_fim(banco, lote_400):
    producao = SessaoProducao(banco)
    sessao = producao.iniciar(lote_400.id, date(2025, 1, 6))
    with pytest.raises(ValidacaoError) as exc:
        producao.finalizar(sessao.id, None, 10)
    assert exc.value.campo == "data_fim"


def test_sessao_inexistente(banco):
    with pytest.raises(SessaoNaoEncontradaError):
        SessaoProducao(banco).finalizar(99, date(2025, 1, 6))


def test_iniciar_lote_vazio(banco, receber, cat_rolo):
    lote = receber("Rolo 40x25", cat_rolo, pacotes=1)
    producao = SessaoProducao(banco)
    producao.iniciar(lote.id, date(2025, 1, 6))
    with pytest.raises(EstoqueInsuficienteError):
        producao.iniciar(lote.id, date(2025, 1, 7))
    assert len(relatorios.listar_sessoes(banco)) == 1


def test_listar_sessoes_abertas(banco, lote_400):
    producao = SessaoProducao(banco)
    aberta = producao.iniciar(lote_400.id, date(2025, 1, 6))
    fechada = producao.iniciar(lote_400.id, date(2025, 1, 7))
    producao.finalizar(fechada.id, date(2025, 1, 8), 10)

    abertas = relatorios.listar_sessoes(banco, StatusSessao.ABERTA)
    assert [s["id"] for s in abertas] == [aberta.id]
    assert abertas[0]["dias_uteis"] is None


def test_iniciar_registra_eventos_de_sistema(banco, receber, cat_rolo, monkeypatch):
    eventos = []
    monkeypatch.setattr(
        "insumos.usecases.producao.log_system_event",
        lambda event, details=None, level="info": eventos.append((event, level)),
    )
    lote = receber("Rolo 40x25", cat_rolo, pacotes=1)
    producao = SessaoProducao(banco)
    producao.iniciar(lote.id, date(2025, 1, 6))
    with pytest.raises(EstoqueInsuficienteError):
        producao.iniciar(lote.id, date(2025, 1, 7))

    assert eventos == [
        ("producao_inicio_start", "info"),
        ("producao_inicio_start", "info"),
        ("producao_inicio_error", "error"),
    ]
