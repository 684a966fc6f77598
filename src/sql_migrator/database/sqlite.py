"""
SQLite database handle.

The connection is opened in autocommit mode and transactions are driven
with explicit BEGIN/COMMIT/ROLLBACK. Migration scripts are split into
complete statements and executed one by one, because
sqlite3.Connection.executescript() commits any open transaction first.
"""

import logging
import re
import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..exceptions import DatabaseError
from .base import Database, Transaction, has_sql

logger = logging.getLogger(__name__)


def split_statements(script: str) -> list[str]:
    """
    Split SQL text into complete statements.

    Uses sqlite3.complete_statement so semicolons inside string literals,
    comments and trigger bodies do not end a statement. A trailing statement
    without a semicolon is kept; pieces holding only comments are dropped.
    """
    statements: list[str] = []
    buffer = ""

    for piece in re.split(r"(?<=;)", script):
        buffer += piece
        if sqlite3.complete_statement(buffer):
            statements.append(buffer)
            buffer = ""
    if buffer:
        statements.append(buffer)

    return [stmt.strip() for stmt in statements if has_sql(stmt)]


class SQLiteTransaction(Transaction):
    """Transaction on an autocommit-mode sqlite3 connection.

    sqlite3 raises OverflowError, not sqlite3.Error, for integers outside
    the 64-bit range, so parameterized statements wrap both.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        try:
            self.conn.execute(sql, tuple(params))
        except (sqlite3.Error, OverflowError) as e:
            raise DatabaseError(str(e)) from e

    def execute_script(self, sql: str) -> None:
        for statement in split_statements(sql):
            try:
                self.conn.execute(statement)
            except sqlite3.Error as e:
                raise DatabaseError(str(e)) from e

    def commit(self) -> None:
        try:
            self.conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise DatabaseError(f"commit failed: {e}") from e

    def rollback(self) -> None:
        # SQLite may already have rolled back on its own (e.g. SQLITE_FULL)
        if not self.conn.in_transaction:
            return
        try:
            self.conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            raise DatabaseError(f"rollback failed: {e}") from e


class SQLiteDatabase(Database):
    """Database handle backed by a SQLite file (or ":memory:")."""

    placeholder = "?"
    backend = "sqlite"

    def __init__(self, path: Path | str, timeout: float = 5.0):
        """
        Open the database.

        Args:
            path: Database file path, parent directories are created
            timeout: Seconds to wait on a locked database
        """
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self.conn = sqlite3.connect(self.path, timeout=timeout, isolation_level=None)
            self.conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise DatabaseError(f"failed to open database {self.path}: {e}") from e

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        try:
            self.conn.execute(sql, tuple(params))
        except (sqlite3.Error, OverflowError) as e:
            raise DatabaseError(str(e)) from e

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        try:
            return self.conn.execute(sql, tuple(params)).fetchall()
        except (sqlite3.Error, OverflowError) as e:
            raise DatabaseError(str(e)) from e

    def begin(self) -> SQLiteTransaction:
        try:
            self.conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise DatabaseError(f"failed to begin transaction: {e}") from e
        return SQLiteTransaction(self.conn)

    def close(self) -> None:
        self.conn.close()
        logger.debug(f"Closed SQLite database {self.path}")
