"""
Database handle interface.

The migration core never opens connections itself. Callers pass in a
Database, which offers exactly what the core needs:

- execute / query for single statements outside an explicit transaction
- begin() for a Transaction that can run a whole migration script
- placeholder, the driver's parameter marker

Implementations wrap every driver error into DatabaseError.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

_COMMENT_RE = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)


def has_sql(script: str) -> bool:
    """True if the text holds anything besides comments, whitespace and semicolons."""
    return bool(_COMMENT_RE.sub("", script).strip().strip(";").strip())


class Transaction(ABC):
    """An open transaction. Must end with commit() or rollback()."""

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute a single statement inside the transaction."""

    @abstractmethod
    def execute_script(self, sql: str) -> None:
        """Execute SQL text that may hold several statements, verbatim."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the transaction."""

    @abstractmethod
    def rollback(self) -> None:
        """Roll the transaction back. Safe to call after a failed statement."""


class Database(ABC):
    """Caller-owned connection handle."""

    placeholder: str = "?"
    backend: str = ""

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute a statement and commit it."""

    @abstractmethod
    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        """Run a query and return all rows."""

    @abstractmethod
    def begin(self) -> Transaction:
        """Open a transaction."""

    @abstractmethod
    def close(self) -> None:
        """Close the underlying connection."""

    def ping(self) -> None:
        """Check that the connection is usable."""
        self.query("SELECT 1")

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
