from datetime import date

import pytest

from insumos.infra.banco import Banco
from insumos.usecases import cadastros
from insumos.usecases.estoque import Estoque


@pytest.fixture
def banco(tmp_path):
    b = Banco(str(tmp_path / "insumos_test.sqlite")).abrir()
    yield b
    b.fechar()


@pytest.fixture
def cat_cartao(banco):
    return cadastros.criar_categoria(banco, "Cartão térmico", "cartao")


@pytest.fixture
def cat_rolo(banco):
    return cadastros.criar_categoria(banco, "Rolo BOPP", "rolo")


@pytest.fixture
def fornecedor(banco):
    return cadastros.criar_fornecedor(banco, "Gráfica Central")


@pytest.fixture
def receber(banco):
    """Atalho para recebimento com valores padrão."""
    estoque = Estoque(banco)

    def _receber(produto, categoria, pacotes=0, avulsas=0, custo=0.0, minimo=0,
                 fornecedor_id=None, data=date(2025, 1, 10)):
        return estoque.receber(
            produto=produto,
            fornecedor_id=fornecedor_id,
            categoria_id=categoria.id,
            pacotes=pacotes,
            unidades_avulsas=avulsas,
            custo_por_pacote=custo,
            estoque_minimo=minimo,
            data_entrada=data,
        )

    return _receber
