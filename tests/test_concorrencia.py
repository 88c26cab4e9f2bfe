"""
Baixas concorrentes no mesmo lote, com threads reais.

Cada thread abre sua própria conexão SQLite; a Barrier solta todas ao mesmo
tempo para forçar a disputa pelo lote.
"""

import gc
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from threading import Barrier

from insumos.domain.erros import EstoqueInsuficienteError
from insumos.usecases.estoque import Estoque
from insumos.usecases.producao import SessaoProducao
from insumos.usecases.registrar_saida import RegistrarSaida


def _disputar(n_threads, tarefa):
    barrier = Barrier(n_threads)

    def _rodar(i):
        barrier.wait()
        try:
            return ("ok", tarefa(i))
        except EstoqueInsuficienteError as e:
            return ("insuficiente", e)

    with ThreadPoolExecutor(max_workers=n_threads) as pool:
        return list(pool.map(_rodar, range(n_threads)))


def test_duas_baixas_de_3000_em_5000(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1, custo=100.0)
    saidas = RegistrarSaida(banco)

    resultados = _disputar(2, lambda i: saidas.executar(lote.id, date(2025, 1, 15), 3000))

    status = sorted(r[0] for r in resultados)
    assert status == ["insuficiente", "ok"]
    falha = next(r[1] for r in resultados if r[0] == "insuficiente")
    assert falha.disponivel == 2000

    final = Estoque(banco).obter(lote.id)
    assert final.total_unidades == 2000
    assert (final.pacotes, final.unidades_avulsas) == (0, 2000)
    with banco.conexao() as c:
        assert c.execute("SELECT COUNT(*) FROM saidas").fetchone()[0] == 1


def test_muitas_baixas_nunca_deixam_saldo_negativo(banco, receber, cat_rolo):
    lote = receber("Rolo 40x25", cat_rolo, pacotes=5, custo=30.0)
    saidas = RegistrarSaida(banco)

    resultados = _disputar(8, lambda i: saidas.executar(lote.id, date(2025, 1, 15), 1))

    assert sum(1 for r in resultados if r[0] == "ok") == 5
    assert Estoque(banco).obter(lote.id).total_unidades == 0


def test_lotes_diferentes_nao_se_bloqueiam(banco, receber, cat_cartao):
    a = receber("Etiqueta A", cat_cartao, pacotes=1)
    b = receber("Etiqueta B", cat_cartao, pacotes=1)
    producao = SessaoProducao(banco)
    lotes = [a.id, b.id] * 2

    resultados = _disputar(4, lambda i: producao.iniciar(lotes[i], date(2025, 1, 6)))

    assert all(r[0] == "ok" for r in resultados)
    assert Estoque(banco).obter(a.id).total_unidades == 4998
    assert Estoque(banco).obter(b.id).total_unidades == 4998


def test_locks_de_lote_liberados_apos_uso(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1)
    with banco.transacao_lote(lote.id):
        assert lote.id in banco._locks
        assert banco._lock_do_lote(lote.id).locked()

    Estoque(banco).excluir(lote.id)
    gc.collect()
    assert lote.id not in banco._locks
    assert len(banco._locks) == 0
