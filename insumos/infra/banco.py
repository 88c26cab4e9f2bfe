"""
Porta de persistência injetada nos casos de uso.

``Banco`` encapsula o caminho do SQLite e o ciclo de vida explícito
(``abrir`` na subida do processo, ``fechar`` no encerramento). Os casos de
uso nunca abrem conexões por conta própria: recebem um ``Banco`` e pedem a
ele uma conexão de leitura ou uma transação.

Controle de concorrência das baixas:

- ``transacao_lote(lote_id)`` segura um lock exclusivo do processo por
  lote (lotes diferentes usam locks diferentes) e abre a transação com
  ``BEGIN IMMEDIATE``, que reserva a escrita no SQLite antes da leitura.
  Assim a sequência ler-conferir-gravar enxerga sempre o último commit.
- Duas baixas no mesmo lote são serializadas: a segunda espera o commit
  (ou rollback) da primeira e relê o saldo atualizado.
- O lock de um lote só existe enquanto alguma transação o usa; lotes
  excluídos não deixam entradas para trás.
"""

from __future__ import annotations

import sqlite3
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator

from insumos.config import DB_PATH, DEFAULTS
from insumos.infra.db import connect
from insumos.infra.logger import log_system_event
from insumos.infra.migrations import apply_migrations
from insumos.infra.views import create_views


class Banco:
    def __init__(self, db_path: str = DB_PATH, timeout: float = DEFAULTS.timeout_lock_s):
        self.db_path = db_path
        self.timeout = timeout
        self._aberto = False
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    # -------------------------
    # ciclo de vida
    # -------------------------

    def abrir(self) -> "Banco":
        """Aplica migrações e views; deve ser chamado uma vez na subida."""
        apply_migrations(self.db_path)
        create_views(self.db_path)
        self._aberto = True
        log_system_event("banco_aberto", {"db_path": self.db_path})
        return self

    def fechar(self) -> None:
        self._aberto = False
        with self._locks_guard:
            self._locks.clear()
        log_system_event("banco_fechado", {"db_path": self.db_path})

    @property
    def aberto(self) -> bool:
        return self._aberto

    def __enter__(self) -> "Banco":
        return self.abrir()

    def __exit__(self, *exc) -> None:
        self.fechar()

    def _exigir_aberto(self) -> None:
        if not self._aberto:
            raise RuntimeError(f"Banco {self.db_path} não foi aberto (chame abrir())")

    # -------------------------
    # conexões
    # -------------------------

    @contextmanager
    def conexao(self) -> Iterator[sqlite3.Connection]:
        """Conexão com commit ao sair e rollback em caso de exceção."""
        self._exigir_aberto()
        with connect(self.db_path, self.timeout) as c:
            yield c

    @contextmanager
    def transacao(self) -> Iterator[sqlite3.Connection]:
        """Transação de escrita reservada desde o início (BEGIN IMMEDIATE)."""
        self._exigir_aberto()
        with connect(self.db_path, self.timeout) as c:
            c.execute("BEGIN IMMEDIATE")
            yield c

    def _lock_do_lote(self, lote_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(lote_id)
            if lock is None:
                lock = self._locks[lote_id] = threading.Lock()
            return lock

    @contextmanager
    def transacao_lote(self, lote_id: int) -> Iterator[sqlite3.Connection]:
        """Transação com acesso exclusivo ao lote ``lote_id``."""
        with self._lock_do_lote(int(lote_id)):
            with self.transacao() as c:
                yield c
