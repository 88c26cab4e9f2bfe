import pytest

from insumos.domain.erros import (
    CategoriaEmUsoError,
    CategoriaNaoEncontradaError,
    ConflitoError,
    FornecedorNaoEncontradoError,
    NomeDuplicadoError,
    ValidacaoError,
)
from insumos.usecases import cadastros
from insumos.usecases.estoque import Estoque


def test_categoria_crud(banco):
    cat = cadastros.criar_categoria(banco, "Embalagens", "embalagem")
    assert cat.tipo_unidade == "embalagem"
    editada = cadastros.editar_categoria(banco, cat.id, nome="Caixas")
    assert (editada.nome, editada.tipo_unidade) == ("Caixas", "embalagem")
    assert [c.nome for c in cadastros.listar_categorias(banco)] == ["Caixas"]
    cadastros.excluir_categoria(banco, cat.id)
    assert cadastros.listar_categorias(banco) == []
    with pytest.raises(CategoriaNaoEncontradaError):
        cadastros.excluir_categoria(banco, cat.id)


def test_categoria_validacoes(banco, cat_cartao):
    with pytest.raises(NomeDuplicadoError):
        cadastros.criar_categoria(banco, "Cartão térmico", "rolo")
    with pytest.raises(ValidacaoError):
        cadastros.criar_categoria(banco, "  ", "rolo")
    with pytest.raises(ValidacaoError) as exc:
        cadastros.criar_categoria(banco, "Fitas", "metro")
    assert exc.value.campo == "tipo_unidade"


def test_categoria_em_uso_nao_pode_ser_excluida(banco, receber, cat_cartao):
    receber("Etiqueta X", cat_cartao, pacotes=1)
    with pytest.raises(CategoriaEmUsoError) as exc:
        cadastros.excluir_categoria(banco, cat_cartao.id)
    assert exc.value.lotes == 1


def test_categoria_em_uso_nao_muda_de_tipo(banco, receber, cat_cartao):
    lote = receber("Etiqueta X", cat_cartao, pacotes=2, avulsas=3100, custo=100.0)
    with pytest.raises(CategoriaEmUsoError) as exc:
        cadastros.editar_categoria(banco, cat_cartao.id, tipo_unidade="rolo")
    assert exc.value.lotes == 1
    assert "mudar de tipo" in exc.value.message

    restante = Estoque(banco).obter(lote.id)
    assert restante.fator == 5000
    assert restante.total_unidades == restante.pacotes * restante.fator + restante.unidades_avulsas
    assert cadastros.obter_categoria_por_nome(banco, "Cartão térmico").tipo_unidade == "cartao"

    # renomear e repetir o mesmo tipo continuam permitidos
    editada = cadastros.editar_categoria(banco, cat_cartao.id, nome="Cartão", tipo_unidade="cartao")
    assert (editada.nome, editada.tipo_unidade) == ("Cartão", "cartao")


def test_categoria_sem_lotes_muda_de_tipo(banco, cat_cartao):
    editada = cadastros.editar_categoria(banco, cat_cartao.id, tipo_unidade="rolo")
    assert editada.tipo_unidade == "rolo"


def test_editar_categoria_nome_duplicado(banco, cat_cartao, cat_rolo):
    with pytest.raises(NomeDuplicadoError):
        cadastros.editar_categoria(banco, cat_rolo.id, nome="Cartão térmico")
    assert cadastros.obter_categoria_por_nome(banco, "Rolo BOPP").id == cat_rolo.id


def test_obter_categoria_por_nome(banco, cat_rolo):
    assert cadastros.obter_categoria_por_nome(banco, "Rolo BOPP").id == cat_rolo.id
    with pytest.raises(CategoriaNaoEncontradaError):
        cadastros.obter_categoria_por_nome(banco, "Inexistente")


def test_fornecedor_crud(banco, fornecedor):
    with pytest.raises(NomeDuplicadoError):
        cadastros.criar_fornecedor(banco, "Gráfica Central")
    editado = cadastros.editar_fornecedor(banco, fornecedor.id, "Gráfica Norte")
    assert editado.nome == "Gráfica Norte"
    with pytest.raises(FornecedorNaoEncontradoError):
        cadastros.editar_fornecedor(banco, 999, "Outra")
    with pytest.raises(FornecedorNaoEncontradoError):
        cadastros.excluir_fornecedor(banco, 999)


def test_excluir_fornecedor_mantem_lotes(banco, receber, cat_cartao, fornecedor):
    lote = receber("Etiqueta X", cat_cartao, pacotes=1, fornecedor_id=fornecedor.id)
    cadastros.excluir_fornecedor(banco, fornecedor.id)
    restante = Estoque(banco).obter(lote.id)
    assert restante.fornecedor_id is None
    assert restante.total_unidades == 5000


def test_obter_ou_criar_fornecedor(banco, fornecedor):
    assert cadastros.obter_ou_criar_fornecedor(banco, "Gráfica Central").id == fornecedor.id
    novo = cadastros.obter_ou_criar_fornecedor(banco, "Papelaria Sul")
    assert novo.id != fornecedor.id
    assert len(cadastros.listar_fornecedores(banco)) == 2


def test_excluir_fornecedor_colide_com_lote_sem_fornecedor(banco, receber, cat_cartao, fornecedor):
    sem_fornecedor = receber("Etiqueta X", cat_cartao, pacotes=1)
    do_fornecedor = receber("Etiqueta X", cat_cartao, pacotes=2, fornecedor_id=fornecedor.id)
    with pytest.raises(ConflitoError):
        cadastros.excluir_fornecedor(banco, fornecedor.id)

    # nada mudou: fornecedor e os dois lotes continuam como estavam
    assert [f.nome for f in cadastros.listar_fornecedores(banco)] == ["Gráfica Central"]
    estoque = Estoque(banco)
    assert estoque.obter(do_fornecedor.id).fornecedor_id == fornecedor.id
    assert estoque.obter(do_fornecedor.id).total_unidades == 10000
    assert estoque.obter(sem_fornecedor.id).total_unidades == 5000
