# insumos/infra/repositories.py
"""
Repositórios (DAO) sobre uma conexão SQLite já aberta.

Classes:
- CategoriaRepo
- FornecedorRepo
- LoteRepo
- SaidaRepo
- UsoProducaoRepo

Os repositórios não fazem commit: a conexão vem de ``Banco.conexao()`` ou
``Banco.transacao_lote()`` e o caso de uso decide o escopo da transação.
"""

from __future__ import annotations

import sqlite3
from dataclasses import asdict, is_dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from insumos.domain.models import Categoria, Fornecedor, Lote, Saida, StatusSessao, UsoProducao


# -------------------------
# Helpers
# -------------------------

def _as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, dict):
        return dict(row)
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d is not None else None


def _rows_to_dicts(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


def _paginar(pagina: int, por_pagina: int) -> Tuple[int, int]:
    pagina = max(int(pagina), 1)
    por_pagina = max(int(por_pagina), 1)
    return por_pagina, (pagina - 1) * por_pagina


# -------------------------
# Cadastros
# -------------------------

class _CadastroRepo:
    tabela: str = ""
    modelo: Any = None

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, id_: int):
        row = self.conn.execute(f"SELECT * FROM {self.tabela} WHERE id = ?", (id_,)).fetchone()
        return self.modelo.from_row(row) if row else None

    def get_by_nome(self, nome: str):
        row = self.conn.execute(f"SELECT * FROM {self.tabela} WHERE nome = ?", (nome,)).fetchone()
        return self.modelo.from_row(row) if row else None

    def get_all(self) -> list:
        cur = self.conn.execute(f"SELECT * FROM {self.tabela} ORDER BY nome")
        return [self.modelo.from_row(r) for r in cur.fetchall()]

    def delete(self, id_: int) -> int:
        return self.conn.execute(f"DELETE FROM {self.tabela} WHERE id = ?", (id_,)).rowcount


class CategoriaRepo(_CadastroRepo):
    tabela = "categorias"
    modelo = Categoria

    def insert(self, nome: str, tipo_unidade: str) -> Categoria:
        cur = self.conn.execute(
            "INSERT INTO categorias (nome, tipo_unidade) VALUES (?, ?)",
            (nome, tipo_unidade),
        )
        return Categoria(id=cur.lastrowid, nome=nome, tipo_unidade=tipo_unidade)

    def update(self, id_: int, nome: str, tipo_unidade: str) -> int:
        return self.conn.execute(
            "UPDATE categorias SET nome = ?, tipo_unidade = ? WHERE id = ?",
            (nome, tipo_unidade, id_),
        ).rowcount

    def count_lotes(self, id_: int) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM estoque WHERE categoria_id = ?", (id_,)
        ).fetchone()
        return int(row[0])


class FornecedorRepo(_CadastroRepo):
    tabela = "fornecedores"
    modelo = Fornecedor

    def insert(self, nome: str) -> Fornecedor:
        cur = self.conn.execute("INSERT INTO fornecedores (nome) VALUES (?)", (nome,))
        return Fornecedor(id=cur.lastrowid, nome=nome)

    def update(self, id_: int, nome: str) -> int:
        return self.conn.execute(
            "UPDATE fornecedores SET nome = ? WHERE id = ?", (nome, id_)
        ).rowcount


# -------------------------
# Lotes (tabela estoque)
# -------------------------

_SELECT_LOTE = """
    SELECT e.*, c.tipo_unidade
    FROM estoque e
    LEFT JOIN categorias c ON c.id = e.categoria_id
"""


class LoteRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, lote_id: int) -> Optional[Lote]:
        row = self.conn.execute(_SELECT_LOTE + " WHERE e.id = ?", (lote_id,)).fetchone()
        return Lote.from_row(row) if row else None

    def find(self, produto: str, fornecedor_id: Optional[int]) -> Optional[Lote]:
        # `IS` compara NULL com NULL como igual
        row = self.conn.execute(
            _SELECT_LOTE + " WHERE e.produto = ? AND e.fornecedor_id IS ?",
            (produto, fornecedor_id),
        ).fetchone()
        return Lote.from_row(row) if row else None

    def get_all(self) -> List[Lote]:
        cur = self.conn.execute(_SELECT_LOTE + " ORDER BY e.produto, e.id")
        return [Lote.from_row(r) for r in cur.fetchall()]

    def insert(self, row: Dict[str, Any]) -> int:
        r = _as_dict(row)
        r["ultima_entrada"] = _iso(r.get("ultima_entrada"))
        cur = self.conn.execute(
            """
            INSERT INTO estoque
                (produto, fornecedor_id, categoria_id, pacotes, unidades_avulsas,
                 total_unidades, custo_por_pacote, estoque_minimo, ultima_entrada)
            VALUES
                (:produto, :fornecedor_id, :categoria_id, :pacotes, :unidades_avulsas,
                 :total_unidades, :custo_por_pacote, :estoque_minimo, :ultima_entrada)
            """,
            r,
        )
        return cur.lastrowid

    def update_entrada(self, lote_id: int, row: Dict[str, Any]) -> int:
        """Grava quantidades e os campos sobrescritos por um recebimento."""
        r = _as_dict(row)
        r["ultima_entrada"] = _iso(r.get("ultima_entrada"))
        r["id"] = lote_id
        return self.conn.execute(
            """
            UPDATE estoque SET
                categoria_id = :categoria_id,
                pacotes = :pacotes,
                unidades_avulsas = :unidades_avulsas,
                total_unidades = :total_unidades,
                custo_por_pacote = :custo_por_pacote,
                estoque_minimo = :estoque_minimo,
                ultima_entrada = :ultima_entrada
            WHERE id = :id
            """,
            r,
        ).rowcount

    def update_quantidades(self, lote_id: int, pacotes: int, unidades_avulsas: int, total_unidades: int) -> int:
        return self.conn.execute(
            """
            UPDATE estoque
            SET pacotes = ?, unidades_avulsas = ?, total_unidades = ?
            WHERE id = ?
            """,
            (pacotes, unidades_avulsas, total_unidades, lote_id),
        ).rowcount

    def update_parametros(self, lote_id: int, custo_por_pacote: float, estoque_minimo: int) -> int:
        return self.conn.execute(
            "UPDATE estoque SET custo_por_pacote = ?, estoque_minimo = ? WHERE id = ?",
            (custo_por_pacote, estoque_minimo, lote_id),
        ).rowcount

    def delete(self, lote_id: int) -> int:
        return self.conn.execute("DELETE FROM estoque WHERE id = ?", (lote_id,)).rowcount

    # --------- consultas de leitura ---------

    def page_detalhe(self, pagina: int, por_pagina: int) -> Tuple[List[Dict[str, Any]], int]:
        limit, offset = _paginar(pagina, por_pagina)
        total = self.conn.execute("SELECT COUNT(*) FROM vw_lotes_detalhe").fetchone()[0]
        cur = self.conn.execute(
            "SELECT * FROM vw_lotes_detalhe ORDER BY produto, id LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return _rows_to_dicts(cur), int(total)

    def list_detalhe(self) -> List[Dict[str, Any]]:
        cur = self.conn.execute("SELECT * FROM vw_lotes_detalhe ORDER BY produto, id")
        return _rows_to_dicts(cur)

    def criticos(self) -> List[Dict[str, Any]]:
        cur = self.conn.execute(
            """
            SELECT id, produto, fornecedor_nome, total_unidades, estoque_minimo
            FROM vw_lotes_detalhe
            WHERE estoque_minimo > 0 AND total_unidades <= estoque_minimo
            ORDER BY produto, id
            """
        )
        return _rows_to_dicts(cur)


# -------------------------
# Saídas
# -------------------------

class SaidaRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def insert(self, row: Dict[str, Any]) -> int:
        r = _as_dict(row)
        r["data"] = _iso(r.get("data"))
        cur = self.conn.execute(
            """
            INSERT INTO saidas
                (data, lote_id, produto_nome, total_unidades, custo_total, destino)
            VALUES
                (:data, :lote_id, :produto_nome, :total_unidades, :custo_total, :destino)
            """,
            r,
        )
        return cur.lastrowid

    def get(self, saida_id: int) -> Optional[Saida]:
        row = self.conn.execute("SELECT * FROM saidas WHERE id = ?", (saida_id,)).fetchone()
        return Saida.from_row(row) if row else None

    def list_by_lote(self, lote_id: int) -> List[Saida]:
        cur = self.conn.execute(
            "SELECT * FROM saidas WHERE lote_id = ? ORDER BY data, id", (lote_id,)
        )
        return [Saida.from_row(r) for r in cur.fetchall()]

    def page_detalhe(self, pagina: int, por_pagina: int) -> Tuple[List[Dict[str, Any]], int]:
        limit, offset = _paginar(pagina, por_pagina)
        total = self.conn.execute("SELECT COUNT(*) FROM saidas").fetchone()[0]
        cur = self.conn.execute(
            "SELECT * FROM vw_saidas_detalhe ORDER BY data DESC, id DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return _rows_to_dicts(cur), int(total)


# -------------------------
# Sessões de produção
# -------------------------

class UsoProducaoRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def insert(self, row: Dict[str, Any]) -> int:
        r = _as_dict(row)
        cur = self.conn.execute(
            """
            INSERT INTO uso_producao (lote_id, produto_nome, data_inicio, status)
            VALUES (?, ?, ?, ?)
            """,
            (r["lote_id"], r["produto_nome"], _iso(r["data_inicio"]), StatusSessao.ABERTA.value),
        )
        return cur.lastrowid

    def get(self, sessao_id: int) -> Optional[UsoProducao]:
        row = self.conn.execute("SELECT * FROM uso_producao WHERE id = ?", (sessao_id,)).fetchone()
        return UsoProducao.from_row(row) if row else None

    def finalizar(self, sessao_id: int, data_fim: date, etiquetas_produzidas: Optional[int]) -> int:
        return self.conn.execute(
            """
            UPDATE uso_producao
            SET data_fim = ?, etiquetas_produzidas = ?, status = ?
            WHERE id = ?
            """,
            (_iso(data_fim), etiquetas_produzidas, StatusSessao.FINALIZADA.value, sessao_id),
        ).rowcount

    def list_detalhe(self, status: Optional[StatusSessao] = None) -> List[Dict[str, Any]]:
        sql = """
            SELECT u.*, e.custo_por_pacote
            FROM uso_producao u
            JOIN estoque e ON e.id = u.lote_id
        """
        params: Tuple[Any, ...] = ()
        if status is not None:
            sql += " WHERE u.status = ?"
            params = (StatusSessao(status).value,)
        sql += " ORDER BY u.data_inicio DESC, u.id DESC"
        return _rows_to_dicts(self.conn.execute(sql, params))
