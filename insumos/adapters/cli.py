# insumos/adapters/cli.py
"""
CLI do controle de insumos (Typer).

Comandos principais:
- migrate                          -> aplica migrações e cria views
- categoria add/list/edit/rm       -> cadastro de categorias
- fornecedor add/list/edit/rm      -> cadastro de fornecedores
- entrada                          -> recebe pacotes/unidades em um lote
- entrada-lotes <xlsx>             -> recebimentos em lote a partir de um XLSX
- saida                            -> baixa N unidades de um lote
- lote list/edit/rm                -> consulta e ajuste de lotes
- saidas list                      -> histórico de saídas
- producao iniciar/finalizar/list  -> sessões de produção
- dashboard / criticos             -> painel e aviso de estoque baixo

Erros de domínio saem com código 2 (validação), 3 (estoque insuficiente),
4 (não encontrado) ou 5 (conflito).
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from datetime import date
from typing import Any, Dict, Iterator, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from insumos.adapters.schemas import (
    AtualizacaoLoteInput,
    CadastroInput,
    FimProducaoInput,
    InicioProducaoInput,
    SaidaInput,
)
from insumos.config import DB_PATH, DEFAULTS
from insumos.domain.erros import (
    ConflitoError,
    EstoqueError,
    EstoqueInsuficienteError,
    NaoEncontradoError,
    ValidacaoError,
)
from insumos.domain.models import StatusSessao
from insumos.infra.banco import Banco
from insumos.usecases import cadastros, relatorios
from insumos.usecases.estoque import Estoque
from insumos.usecases.producao import SessaoProducao
from insumos.usecases.registrar_entrada import run_entrada, run_entrada_lote
from insumos.usecases.registrar_saida import RegistrarSaida


app = typer.Typer(help="Controle de Insumos: CLI")
console = Console()

DB_OPTION = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")
JSON_OPTION = typer.Option(False, "--json", help="Saída em JSON")


# -----------------------
# util
# -----------------------

def _codigo_saida(erro: EstoqueError) -> int:
    if isinstance(erro, ValidacaoError):
        return 2
    if isinstance(erro, EstoqueInsuficienteError):
        return 3
    if isinstance(erro, NaoEncontradoError):
        return 4
    if isinstance(erro, ConflitoError):
        return 5
    return 1


@contextmanager
def _banco(db_path: str) -> Iterator[Banco]:
    """Abre o banco e converte erros de domínio em mensagem + código de saída."""
    banco = Banco(db_path).abrir()
    try:
        yield banco
    except EstoqueError as e:
        typer.echo(f"Erro [{e.code}]: {e.message}", err=True)
        raise typer.Exit(code=_codigo_saida(e))
    finally:
        banco.fechar()


def _plain(obj: Any) -> Any:
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, list):
        return [_plain(o) for o in obj]
    return obj


def _print_json(obj) -> None:
    typer.echo(json.dumps(_plain(obj), ensure_ascii=False, indent=2, default=str))


def _fmt(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "sim" if val else "não"
    if isinstance(val, float):
        return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    if isinstance(val, date):
        return val.strftime("%d/%m/%Y")
    if hasattr(val, "value"):
        return str(val.value)
    return str(val)


def _display_table(data: Any, title: str = "Resultado", colunas: Optional[List[str]] = None) -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    data = _plain(data)
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    # Lista de itens
    if isinstance(data, list) and isinstance(data[0], dict):
        table = Table(title=title, box=box.ROUNDED)
        columns = colunas or list(data[0].keys())
        for column in columns:
            if column in ("total_unidades", "pacotes", "unidades_avulsas", "estoque_minimo",
                          "custo_por_pacote", "custo_total", "valor_estoque"):
                table.add_column(column, justify="right")
            elif column.startswith("data") or column == "ultima_entrada":
                table.add_column(column, justify="center")
            else:
                table.add_column(column)
        for row in data:
            valores = []
            for col in columns:
                val = row.get(col)
                if col == "critico" and val:
                    valores.append("[bold red]CRÍTICO[/]")
                else:
                    valores.append(_fmt(val))
            table.add_row(*valores)
        console.print(table)
        return

    # Página de resultados
    if isinstance(data, dict) and "itens" in data and "paginas" in data:
        _display_table(data["itens"], title=title, colunas=colunas)
        console.print(
            f"[dim]Página {data['pagina']} de {data['paginas']} ({data['total']} registros)[/dim]"
        )
        return

    # Recebimentos em lote
    if isinstance(data, dict) and "erros" in data and "total" in data:
        panel_content = [
            f"Total de registros: {data['total']}",
            f"Processados com sucesso: {data.get('sucessos', 0)}",
        ]
        if data["erros"]:
            panel_content.append(f"Erros: {len(data['erros'])}")
        console.print(Panel("\n".join(panel_content), title=title))

        if data["erros"]:
            erro_table = Table(title="Erros Encontrados")
            erro_table.add_column("Linha")
            erro_table.add_column("Erro")
            for erro in data["erros"]:
                erro_table.add_row(str(erro.get("linha", "?")), erro.get("mensagem", "Erro desconhecido"))
            console.print(erro_table)
        return

    # Registro único (lote, saída, sessão, estatísticas)
    if isinstance(data, dict):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Campo")
        table.add_column("Valor")
        for chave, valor in data.items():
            table.add_row(chave, _fmt(valor))
        console.print(table)
        return

    _print_json(data)


def _mostrar(data: Any, como_json: bool, title: str, colunas: Optional[List[str]] = None) -> None:
    if como_json:
        _print_json(data)
    else:
        _display_table(data, title=title, colunas=colunas)


def _sem_nulos(**kwargs) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPTION):
    """Aplica migrações e recria as views auxiliares."""
    Banco(db_path).abrir().fechar()
    typer.echo(f">> Migrações aplicadas e views criadas em: {db_path}")


# -----------------------
# cadastros
# -----------------------

categoria_app = typer.Typer(help="Cadastro de categorias (cartao, rolo, embalagem).")
app.add_typer(categoria_app, name="categoria")


@categoria_app.command("add")
def cmd_categoria_add(
    nome: str = typer.Argument(..., help="Nome da categoria"),
    tipo: str = typer.Option("cartao", "--tipo", help="cartao | rolo | embalagem"),
    db_path: str = DB_OPTION,
):
    """Cadastra uma categoria."""
    with _banco(db_path) as banco:
        inp = CadastroInput.from_dict({"nome": nome, "tipo_unidade": tipo})
        cat = cadastros.criar_categoria(banco, inp.nome, inp.tipo_unidade)
    typer.echo(f">> Categoria {cat.id} criada: {cat.nome} ({cat.tipo_unidade})")


@categoria_app.command("list")
def cmd_categoria_list(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lista as categorias."""
    with _banco(db_path) as banco:
        _mostrar(cadastros.listar_categorias(banco), como_json, "Categorias")


@categoria_app.command("edit")
def cmd_categoria_edit(
    categoria_id: int = typer.Argument(...),
    nome: Optional[str] = typer.Option(None, "--nome"),
    tipo: Optional[str] = typer.Option(None, "--tipo", help="cartao | rolo | embalagem"),
    db_path: str = DB_OPTION,
):
    """Renomeia ou troca o tipo de uma categoria."""
    with _banco(db_path) as banco:
        cat = cadastros.editar_categoria(banco, categoria_id, nome=nome, tipo_unidade=tipo)
    typer.echo(f">> Categoria {cat.id} atualizada: {cat.nome} ({cat.tipo_unidade})")


@categoria_app.command("rm")
def cmd_categoria_rm(categoria_id: int = typer.Argument(...), db_path: str = DB_OPTION):
    """Exclui uma categoria sem lotes."""
    with _banco(db_path) as banco:
        cadastros.excluir_categoria(banco, categoria_id)
    typer.echo(f">> Categoria {categoria_id} excluída.")


fornecedor_app = typer.Typer(help="Cadastro de fornecedores.")
app.add_typer(fornecedor_app, name="fornecedor")


@fornecedor_app.command("add")
def cmd_fornecedor_add(nome: str = typer.Argument(...), db_path: str = DB_OPTION):
    """Cadastra um fornecedor."""
    with _banco(db_path) as banco:
        inp = CadastroInput.from_dict({"nome": nome})
        forn = cadastros.criar_fornecedor(banco, inp.nome)
    typer.echo(f">> Fornecedor {forn.id} criado: {forn.nome}")


@fornecedor_app.command("list")
def cmd_fornecedor_list(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lista os fornecedores."""
    with _banco(db_path) as banco:
        _mostrar(cadastros.listar_fornecedores(banco), como_json, "Fornecedores")


@fornecedor_app.command("edit")
def cmd_fornecedor_edit(
    fornecedor_id: int = typer.Argument(...),
    nome: str = typer.Argument(...),
    db_path: str = DB_OPTION,
):
    """Renomeia um fornecedor."""
    with _banco(db_path) as banco:
        forn = cadastros.editar_fornecedor(banco, fornecedor_id, nome)
    typer.echo(f">> Fornecedor {forn.id} atualizado: {forn.nome}")


@fornecedor_app.command("rm")
def cmd_fornecedor_rm(fornecedor_id: int = typer.Argument(...), db_path: str = DB_OPTION):
    """Exclui um fornecedor; os lotes dele ficam sem fornecedor."""
    with _banco(db_path) as banco:
        cadastros.excluir_fornecedor(banco, fornecedor_id)
    typer.echo(f">> Fornecedor {fornecedor_id} excluído.")


# -----------------------
# comandos de movimentação
# -----------------------

@app.command("entrada")
def cmd_entrada(
    produto: str = typer.Option(..., "--produto"),
    categoria_id: int = typer.Option(..., "--categoria", help="ID da categoria"),
    fornecedor_id: Optional[int] = typer.Option(None, "--fornecedor", help="ID do fornecedor"),
    pacotes: int = typer.Option(0, "--pacotes"),
    avulsas: int = typer.Option(0, "--avulsas", help="Etiquetas avulsas (só cartão)"),
    custo: str = typer.Option("0", "--custo", help="Custo por pacote (aceita vírgula)"),
    minimo: int = typer.Option(0, "--minimo", help="Estoque mínimo em unidades"),
    data: Optional[str] = typer.Option(None, "--data", help="YYYY-MM-DD ou DD/MM/AAAA"),
    db_path: str = DB_OPTION,
):
    """Recebe pacotes em um lote (cria o lote ou soma ao existente)."""
    payload = _sem_nulos(
        produto=produto,
        categoria_id=categoria_id,
        fornecedor_id=fornecedor_id,
        pacotes=pacotes,
        unidades_avulsas=avulsas,
        custo_por_pacote=custo,
        estoque_minimo=minimo,
        data_entrada=data,
    )
    with _banco(db_path) as banco:
        lote = run_entrada(banco, payload)
    _display_table(lote, title="Entrada Registrada")


@app.command("entrada-lotes")
def cmd_entrada_lotes(
    path: str = typer.Argument(..., help="Caminho do XLSX de recebimentos"),
    db_path: str = DB_OPTION,
    como_json: bool = JSON_OPTION,
):
    """Registra recebimentos em lote a partir de um XLSX."""
    with _banco(db_path) as banco:
        info = run_entrada_lote(banco, path)
    _mostrar(info, como_json, "Processamento de Entradas em Lote")


@app.command("saida")
def cmd_saida(
    lote_id: int = typer.Option(..., "--lote"),
    quantidade: int = typer.Option(..., "--quantidade", help="Unidades a baixar"),
    data: Optional[str] = typer.Option(None, "--data", help="YYYY-MM-DD ou DD/MM/AAAA"),
    destino: Optional[str] = typer.Option(None, "--destino"),
    db_path: str = DB_OPTION,
):
    """Baixa unidades de um lote e registra a saída."""
    with _banco(db_path) as banco:
        inp = SaidaInput.from_dict(
            _sem_nulos(lote_id=lote_id, quantidade=quantidade, data=data, destino=destino)
        )
        saida = RegistrarSaida(banco).executar(inp.lote_id, inp.data, inp.quantidade, inp.destino)
    _display_table(saida, title="Saída Registrada")


# -----------------------
# lotes e saídas
# -----------------------

lote_app = typer.Typer(help="Consulta e ajuste de lotes.")
app.add_typer(lote_app, name="lote")

_COLUNAS_LOTE = [
    "id", "produto", "fornecedor_nome", "categoria_nome", "pacotes", "unidades_avulsas",
    "total_unidades", "custo_por_pacote", "valor_estoque", "estoque_minimo", "critico",
]


@lote_app.command("list")
def cmd_lote_list(
    pagina: int = typer.Option(1, "--pagina"),
    por_pagina: int = typer.Option(DEFAULTS.itens_por_pagina, "--por-pagina"),
    db_path: str = DB_OPTION,
    como_json: bool = JSON_OPTION,
):
    """Lista os lotes (paginado)."""
    with _banco(db_path) as banco:
        res = relatorios.listar_lotes(banco, pagina, por_pagina)
    _mostrar(res, como_json, "Lotes", colunas=_COLUNAS_LOTE)


@lote_app.command("edit")
def cmd_lote_edit(
    lote_id: int = typer.Argument(...),
    custo: Optional[str] = typer.Option(None, "--custo", help="Novo custo por pacote"),
    minimo: Optional[int] = typer.Option(None, "--minimo", help="Novo estoque mínimo"),
    db_path: str = DB_OPTION,
):
    """Ajusta custo por pacote e estoque mínimo de um lote."""
    with _banco(db_path) as banco:
        inp = AtualizacaoLoteInput.from_dict(
            _sem_nulos(lote_id=lote_id, custo_por_pacote=custo, estoque_minimo=minimo)
        )
        lote = Estoque(banco).atualizar(inp.lote_id, inp.custo_por_pacote, inp.estoque_minimo)
    _display_table(lote, title="Lote Atualizado")


@lote_app.command("rm")
def cmd_lote_rm(lote_id: int = typer.Argument(...), db_path: str = DB_OPTION):
    """Exclui um lote com suas saídas e sessões."""
    with _banco(db_path) as banco:
        Estoque(banco).excluir(lote_id)
    typer.echo(f">> Lote {lote_id} excluído.")


saidas_app = typer.Typer(help="Histórico de saídas.")
app.add_typer(saidas_app, name="saidas")


@saidas_app.command("list")
def cmd_saidas_list(
    pagina: int = typer.Option(1, "--pagina"),
    por_pagina: int = typer.Option(DEFAULTS.itens_por_pagina, "--por-pagina"),
    db_path: str = DB_OPTION,
    como_json: bool = JSON_OPTION,
):
    """Lista as saídas, mais recentes primeiro."""
    with _banco(db_path) as banco:
        res = relatorios.listar_saidas(banco, pagina, por_pagina)
    _mostrar(res, como_json, "Saídas")


# -----------------------
# produção
# -----------------------

producao_app = typer.Typer(help="Sessões de produção.")
app.add_typer(producao_app, name="producao")


@producao_app.command("iniciar")
def cmd_producao_iniciar(
    lote_id: int = typer.Option(..., "--lote"),
    data: Optional[str] = typer.Option(None, "--data", help="Data de início"),
    db_path: str = DB_OPTION,
):
    """Coloca uma unidade do lote em produção (baixa 1 unidade)."""
    with _banco(db_path) as banco:
        inp = InicioProducaoInput.from_dict(_sem_nulos(lote_id=lote_id, data_inicio=data))
        sessao = SessaoProducao(banco).iniciar(inp.lote_id, inp.data_inicio)
    _display_table(sessao, title="Sessão Iniciada")


@producao_app.command("finalizar")
def cmd_producao_finalizar(
    sessao_id: int = typer.Option(..., "--sessao"),
    data_fim: str = typer.Option(..., "--data-fim", help="Data de fim"),
    etiquetas: Optional[int] = typer.Option(None, "--etiquetas", help="Etiquetas produzidas"),
    db_path: str = DB_OPTION,
):
    """Encerra uma sessão de produção."""
    with _banco(db_path) as banco:
        inp = FimProducaoInput.from_dict(
            _sem_nulos(sessao_id=sessao_id, data_fim=data_fim, etiquetas_produzidas=etiquetas)
        )
        sessao = SessaoProducao(banco).finalizar(inp.sessao_id, inp.data_fim, inp.etiquetas_produzidas)
    _display_table(sessao, title="Sessão Finalizada")


@producao_app.command("list")
def cmd_producao_list(
    status: Optional[StatusSessao] = typer.Option(None, "--status"),
    db_path: str = DB_OPTION,
    como_json: bool = JSON_OPTION,
):
    """Lista sessões de produção com dias úteis, custo/dia e etiquetas/dia."""
    with _banco(db_path) as banco:
        res = relatorios.listar_sessoes(banco, status)
    _mostrar(res, como_json, "Sessões de Produção")


# -----------------------
# painel
# -----------------------

@app.command("dashboard")
def cmd_dashboard(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Totais do estoque e lotes abaixo do mínimo."""
    with _banco(db_path) as banco:
        stats = relatorios.estatisticas(banco)
        criticos = relatorios.lotes_criticos(banco)
    if como_json:
        _print_json({"estatisticas": stats, "criticos": criticos})
        return
    _display_table(stats, title="Painel")
    if criticos:
        _display_table(criticos, title="Estoque Baixo")


@app.command("criticos")
def cmd_criticos(db_path: str = DB_OPTION, como_json: bool = JSON_OPTION):
    """Lotes com saldo menor ou igual ao estoque mínimo."""
    with _banco(db_path) as banco:
        res = relatorios.lotes_criticos(banco)
    _mostrar(res, como_json, "Estoque Baixo")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
