"""
Estruturas de entrada validadas, uma por operação.

Cada estrutura enumera os campos obrigatórios e opcionais aceitos na
fronteira (CLI, planilha, JSON). ``from_dict`` rejeita campos
desconhecidos, tipos errados e quantidades negativas antes que qualquer
dado chegue ao núcleo.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional

from insumos.adapters.parsers import normalize_str, parse_data, parse_decimal, parse_inteiro
from insumos.domain.erros import ValidacaoError


def _verificar_campos(cls, payload: Mapping[str, Any], obrigatorios: tuple) -> Dict[str, Any]:
    if payload is None or not isinstance(payload, Mapping):
        raise ValidacaoError("Payload deve ser um objeto com campos nomeados")
    aceitos = {f.name for f in fields(cls)}
    desconhecidos = sorted(set(payload) - aceitos)
    if desconhecidos:
        raise ValidacaoError(f"Campos desconhecidos: {', '.join(desconhecidos)}", campo=desconhecidos[0])
    for nome in obrigatorios:
        v = payload.get(nome)
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValidacaoError(f"Campo obrigatório ausente: {nome}", campo=nome)
    return dict(payload)


def _nao_negativo(valor: Optional[float], campo: str) -> None:
    if valor is not None and valor < 0:
        raise ValidacaoError(f"{campo} não pode ser negativo", campo=campo)


def _opcional(payload: Dict[str, Any], nome: str, parser: Callable, default: Any = None) -> Any:
    v = parser(payload.get(nome), nome)
    return default if v is None else v


def _texto(val: Any, campo: str) -> Optional[str]:
    if val is not None and not isinstance(val, (str, int, float)):
        raise ValidacaoError(f"{campo}: texto inválido", campo=campo)
    return normalize_str(val)


@dataclass
class CadastroInput:
    """Categoria ou fornecedor."""
    nome: str
    tipo_unidade: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CadastroInput":
        p = _verificar_campos(cls, payload, ("nome",))
        return cls(nome=_texto(p["nome"], "nome"), tipo_unidade=_texto(p.get("tipo_unidade"), "tipo_unidade"))


@dataclass
class EntradaInput:
    produto: str
    categoria_id: int
    fornecedor_id: Optional[int] = None
    pacotes: int = 0
    unidades_avulsas: int = 0
    custo_por_pacote: float = 0.0
    estoque_minimo: int = 0
    data_entrada: date = field(default_factory=date.today)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EntradaInput":
        p = _verificar_campos(cls, payload, ("produto", "categoria_id"))
        inp = cls(
            produto=_texto(p["produto"], "produto"),
            categoria_id=parse_inteiro(p["categoria_id"], "categoria_id"),
            fornecedor_id=parse_inteiro(p.get("fornecedor_id"), "fornecedor_id"),
            pacotes=_opcional(p, "pacotes", parse_inteiro, 0),
            unidades_avulsas=_opcional(p, "unidades_avulsas", parse_inteiro, 0),
            custo_por_pacote=_opcional(p, "custo_por_pacote", parse_decimal, 0.0),
            estoque_minimo=_opcional(p, "estoque_minimo", parse_inteiro, 0),
            data_entrada=_opcional(p, "data_entrada", parse_data, date.today()),
        )
        for campo in ("pacotes", "unidades_avulsas", "custo_por_pacote", "estoque_minimo"):
            _nao_negativo(getattr(inp, campo), campo)
        if inp.pacotes == 0 and inp.unidades_avulsas == 0:
            raise ValidacaoError("Informe pacotes ou unidades avulsas", campo="pacotes")
        return inp


@dataclass
class SaidaInput:
    lote_id: int
    quantidade: int
    data: date = field(default_factory=date.today)
    destino: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SaidaInput":
        p = _verificar_campos(cls, payload, ("lote_id", "quantidade"))
        inp = cls(
            lote_id=parse_inteiro(p["lote_id"], "lote_id"),
            quantidade=parse_inteiro(p["quantidade"], "quantidade"),
            data=_opcional(p, "data", parse_data, date.today()),
            destino=_texto(p.get("destino"), "destino"),
        )
        if inp.quantidade <= 0:
            raise ValidacaoError("quantidade deve ser maior que zero", campo="quantidade")
        return inp


@dataclass
class InicioProducaoInput:
    lote_id: int
    data_inicio: date = field(default_factory=date.today)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "InicioProducaoInput":
        p = _verificar_campos(cls, payload, ("lote_id",))
        return cls(
            lote_id=parse_inteiro(p["lote_id"], "lote_id"),
            data_inicio=_opcional(p, "data_inicio", parse_data, date.today()),
        )


@dataclass
class FimProducaoInput:
    sessao_id: int
    data_fim: date
    etiquetas_produzidas: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FimProducaoInput":
        p = _verificar_campos(cls, payload, ("sessao_id", "data_fim"))
        inp = cls(
            sessao_id=parse_inteiro(p["sessao_id"], "sessao_id"),
            data_fim=parse_data(p["data_fim"], "data_fim"),
            etiquetas_produzidas=parse_inteiro(p.get("etiquetas_produzidas"), "etiquetas_produzidas"),
        )
        _nao_negativo(inp.etiquetas_produzidas, "etiquetas_produzidas")
        return inp


@dataclass
class AtualizacaoLoteInput:
    lote_id: int
    custo_por_pacote: Optional[float] = None
    estoque_minimo: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AtualizacaoLoteInput":
        p = _verificar_campos(cls, payload, ("lote_id",))
        inp = cls(
            lote_id=parse_inteiro(p["lote_id"], "lote_id"),
            custo_por_pacote=parse_decimal(p.get("custo_por_pacote"), "custo_por_pacote"),
            estoque_minimo=parse_inteiro(p.get("estoque_minimo"), "estoque_minimo"),
        )
        _nao_negativo(inp.custo_por_pacote, "custo_por_pacote")
        _nao_negativo(inp.estoque_minimo, "estoque_minimo")
        if inp.custo_por_pacote is None and inp.estoque_minimo is None:
            raise ValidacaoError("Nada a alterar: informe custo_por_pacote ou estoque_minimo")
        return inp
