# insumos/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas base (fornecedores, categorias, estoque, saidas, uso_producao)
V2: triggers de imutabilidade (saídas e sessões finalizadas)
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Cadastro de fornecedores
    """
    CREATE TABLE IF NOT EXISTS fornecedores (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        nome TEXT NOT NULL UNIQUE
    );
    """,
    # Categorias: o rótulo define a conversão pacote/unidade
    """
    CREATE TABLE IF NOT EXISTS categorias (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        nome TEXT NOT NULL UNIQUE,
        tipo_unidade TEXT NOT NULL DEFAULT 'cartao'
            CHECK (tipo_unidade IN ('cartao', 'rolo', 'embalagem'))
    );
    """,
    # Lotes: um por (produto, fornecedor)
    """
    CREATE TABLE IF NOT EXISTS estoque (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        produto TEXT NOT NULL,
        fornecedor_id INTEGER,
        categoria_id INTEGER,
        pacotes INTEGER NOT NULL DEFAULT 0,
        unidades_avulsas INTEGER NOT NULL DEFAULT 0,
        total_unidades INTEGER NOT NULL DEFAULT 0 CHECK (total_unidades >= 0),
        custo_por_pacote REAL NOT NULL DEFAULT 0,
        estoque_minimo INTEGER NOT NULL DEFAULT 0,
        ultima_entrada TEXT,
        FOREIGN KEY (fornecedor_id) REFERENCES fornecedores(id) ON DELETE SET NULL,
        FOREIGN KEY (categoria_id) REFERENCES categorias(id) ON DELETE SET NULL
    );
    """,
    # NULL de fornecedor conta como um único valor na unicidade
    """
    CREATE UNIQUE INDEX IF NOT EXISTS ux_estoque_produto_fornecedor
        ON estoque (produto, IFNULL(fornecedor_id, 0));
    """,
    # Saídas (baixas de estoque)
    """
    CREATE TABLE IF NOT EXISTS saidas (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        data TEXT NOT NULL,
        lote_id INTEGER NOT NULL,
        produto_nome TEXT NOT NULL,
        total_unidades INTEGER NOT NULL,
        custo_total REAL NOT NULL,
        destino TEXT,
        FOREIGN KEY (lote_id) REFERENCES estoque(id) ON DELETE CASCADE
    );
    """,
    # Sessões de produção
    """
    CREATE TABLE IF NOT EXISTS uso_producao (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        lote_id INTEGER NOT NULL,
        produto_nome TEXT NOT NULL,
        data_inicio TEXT NOT NULL,
        data_fim TEXT,
        etiquetas_produzidas INTEGER,
        status TEXT NOT NULL DEFAULT 'aberta'
            CHECK (status IN ('aberta', 'finalizada')),
        FOREIGN KEY (lote_id) REFERENCES estoque(id) ON DELETE CASCADE
    );
    """,
]

# V2: o banco recusa alterações em registros que o domínio considera imutáveis
SCHEMA_V2: List[str] = [
    """
    CREATE TRIGGER IF NOT EXISTS trg_saidas_imutaveis
    BEFORE UPDATE ON saidas
    BEGIN
        SELECT RAISE(ABORT, 'saidas sao imutaveis');
    END;
    """,
    """
    CREATE TRIGGER IF NOT EXISTS trg_uso_producao_finalizada
    BEFORE UPDATE ON uso_producao
    WHEN OLD.status = 'finalizada'
    BEGIN
        SELECT RAISE(ABORT, 'sessao de producao finalizada e imutavel');
    END;
    """,
]


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    for sql in SCHEMA_V2:
        conn.executescript(sql)


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2
