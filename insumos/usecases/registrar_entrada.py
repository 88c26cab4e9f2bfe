# insumos/usecases/registrar_entrada.py
"""
UC: Registrar ENTRADAS (única e em lote a partir de planilha).

Obs.:
- Na planilha a categoria vem por nome e precisa estar cadastrada; o
  fornecedor, se não existir, é cadastrado na hora.
- Cada linha é recebida na sua própria transação. Linhas com erro de
  domínio são reportadas e não interrompem as demais.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping

from insumos.adapters.planilha_loader import load_entradas_from_xlsx
from insumos.adapters.schemas import EntradaInput
from insumos.domain.erros import EstoqueError, ValidacaoError
from insumos.domain.models import Lote
from insumos.infra.banco import Banco
from insumos.infra.logger import (
    log_entrada,
    log_file_operation,
    log_system_event,
    log_transaction,
    print_system,
)
from insumos.usecases.cadastros import obter_categoria_por_nome, obter_ou_criar_fornecedor
from insumos.usecases.estoque import Estoque


def run_entrada(banco: Banco, payload: Mapping[str, Any]) -> Lote:
    """Valida um payload de entrada (ids de categoria/fornecedor) e recebe."""
    inp = EntradaInput.from_dict(payload)
    return Estoque(banco).receber(**asdict(inp))


def _payload_da_linha(banco: Banco, row: Dict[str, Any]) -> Dict[str, Any]:
    rec = dict(row)
    rec.pop("linha", None)
    nome_categoria = rec.pop("categoria", None)
    nome_fornecedor = rec.pop("fornecedor", None)
    if not nome_categoria:
        raise ValidacaoError("Categoria é obrigatória", campo="categoria")

    payload = {k: v for k, v in rec.items() if v is not None}
    payload["categoria_id"] = obter_categoria_por_nome(banco, nome_categoria).id
    if nome_fornecedor:
        payload["fornecedor_id"] = obter_ou_criar_fornecedor(banco, nome_fornecedor).id
    return payload


def run_entrada_lote(banco: Banco, path: str) -> Dict[str, Any]:
    """Lê um XLSX de recebimentos e recebe linha a linha.

    Retorna ``{"tipo", "arquivo", "total", "sucessos", "erros"}`` onde
    ``erros`` é uma lista de ``{"linha", "mensagem"}``.
    """
    log_system_event("entrada_lote_start", {"file_path": path})
    try:
        rows: List[Dict[str, Any]] = load_entradas_from_xlsx(path)
        log_file_operation("import", path, rows_processed=len(rows))
    except Exception as e:
        log_transaction("entrada_lote", {"file": path}, error=str(e))
        log_system_event("entrada_lote_error", {"file_path": path, "error": str(e)}, level="error")
        raise

    estoque = Estoque(banco)
    sucessos = 0
    erros: List[Dict[str, Any]] = []
    for row in rows:
        linha = row.get("linha")
        try:
            lote = estoque.receber(**asdict(EntradaInput.from_dict(_payload_da_linha(banco, row))))
        except EstoqueError as e:
            erros.append({"linha": linha, "mensagem": e.message})
            log_entrada("batch_error", None, row.get("pacotes"), linha=linha, error=e.message)
            continue
        sucessos += 1
        log_entrada("batch", lote.id, lote.total_unidades, linha=linha)

    result = {
        "tipo": "entrada",
        "arquivo": path,
        "total": len(rows),
        "sucessos": sucessos,
        "erros": erros,
    }
    print_system(f">> {sucessos} de {len(rows)} linha(s) recebida(s).")
    log_transaction("entrada_lote", {"file": path, "rows_count": len(rows)}, result=result)
    log_system_event("entrada_lote_success", {"file_path": path, "sucessos": sucessos, "erros": len(erros)})
    return result
