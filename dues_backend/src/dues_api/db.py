from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, ContextManager, Dict, Iterator, List, Optional, Protocol, Sequence

from .errors import QueryFailed, StoreUnavailable
from .models import WriteResult

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


@dataclass(frozen=True)
class _Cols:
    table: str = "dues"
    id: str = "id"
    due_date: str = "due_date"
    amount: str = "amount"
    status: str = "status"
    due_type: str = "due_type"
    receipt_number: str = "receipt_number"


COLS = _Cols()

Row = Dict[str, Any]


# PUBLIC_INTERFACE
class StoreHandle(Protocol):
    """A live connection able to run parameterized statements."""

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        """Run a read statement and return its rows as mappings."""

    def execute(self, sql: str, params: Sequence[Any] = ()) -> WriteResult:
        """Run a write statement and return the affected row count and insert id."""


# PUBLIC_INTERFACE
class ConnectionProvider(Protocol):
    """Hands out store handles; owns connection lifetime, commit and close."""

    def connection(self) -> ContextManager[StoreHandle]:
        """Return a context manager yielding a StoreHandle."""


class _SQLiteHandle:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        try:
            rows = self._conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            logger.error("Read statement failed: %s", e)
            raise QueryFailed(str(e)) from e
        return [dict(r) for r in rows]

    def execute(self, sql: str, params: Sequence[Any] = ()) -> WriteResult:
        try:
            cur = self._conn.execute(sql, tuple(params))
        except sqlite3.Error as e:
            logger.error("Write statement failed: %s", e)
            raise QueryFailed(str(e)) from e
        return WriteResult(affected_rows=cur.rowcount, insert_id=cur.lastrowid or 0)


class SQLiteConnectionProvider:
    """
    SQLite-backed connection provider.

    A file database gets a fresh connection per operation, committed and closed
    when the context exits. The ':memory:' database lives only as long as its
    connection, so a single connection is shared and guarded by a lock.
    """

    def __init__(self, db_path: str = MEMORY_DB) -> None:
        self._db_path = db_path
        self._lock = RLock()
        self._shared: Optional[sqlite3.Connection] = None
        if db_path == MEMORY_DB:
            self._shared = self._open()
        else:
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._init_db()

    @property
    def db_path(self) -> str:
        return self._db_path

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path, check_same_thread=False)
        except sqlite3.Error as e:
            logger.error("Cannot open database %s: %s", self._db_path, e)
            raise StoreUnavailable(f"Cannot open database at {self._db_path}") from e
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _commit(conn: sqlite3.Connection) -> None:
        try:
            conn.commit()
        except sqlite3.Error as e:
            logger.error("Commit failed: %s", e)
            raise QueryFailed(str(e)) from e

    @contextmanager
    def connection(self) -> Iterator[StoreHandle]:
        if self._shared is not None:
            with self._lock:
                try:
                    yield _SQLiteHandle(self._shared)
                except BaseException:
                    self._shared.rollback()
                    raise
                self._commit(self._shared)
            return

        conn = self._open()
        try:
            yield _SQLiteHandle(conn)
            self._commit(conn)
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self.connection() as handle:
            handle.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {COLS.table} (
                    {COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {COLS.due_date} TEXT NOT NULL,
                    {COLS.amount} NUMERIC NOT NULL,
                    {COLS.status} TEXT NOT NULL,
                    {COLS.due_type} TEXT NOT NULL,
                    {COLS.receipt_number} TEXT NOT NULL
                )
                """
            )

    def close(self) -> None:
        """Close the shared in-memory connection, if any."""
        if self._shared is not None:
            self._shared.close()
            self._shared = None
