"""
PostgreSQL database handle (psycopg2).

psycopg2 opens a transaction implicitly on the first statement, so begin()
only hands out a Transaction bound to the connection. Scripts are sent as a
single simple query, which PostgreSQL runs statement by statement inside
that transaction.
"""

import logging
from collections.abc import Sequence
from typing import Any

import psycopg2

from ..exceptions import DatabaseError
from .base import Database, Transaction, has_sql

logger = logging.getLogger(__name__)


class PostgresTransaction(Transaction):
    """Transaction on a psycopg2 connection."""

    def __init__(self, conn: Any):
        self.conn = conn

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql, tuple(params) or None)
        except psycopg2.Error as e:
            raise DatabaseError(str(e).strip()) from e

    def execute_script(self, sql: str) -> None:
        # psycopg2 rejects an empty query; a script of only comments is a no-op
        if not has_sql(sql):
            return
        try:
            with self.conn.cursor() as cur:
                # No parameters: '%' in the script is sent as-is
                cur.execute(sql)
        except psycopg2.Error as e:
            raise DatabaseError(str(e).strip()) from e

    def commit(self) -> None:
        try:
            self.conn.commit()
        except psycopg2.Error as e:
            raise DatabaseError(f"commit failed: {str(e).strip()}") from e

    def rollback(self) -> None:
        try:
            self.conn.rollback()
        except psycopg2.Error as e:
            raise DatabaseError(f"rollback failed: {str(e).strip()}") from e


class PostgresDatabase(Database):
    """Database handle backed by a psycopg2 connection."""

    placeholder = "%s"
    backend = "postgres"

    def __init__(self, dsn: str):
        """
        Connect to PostgreSQL.

        Args:
            dsn: libpq connection string (see DatabaseConfig.to_dsn)
        """
        try:
            self.conn = psycopg2.connect(dsn)
        except psycopg2.Error as e:
            raise DatabaseError(f"failed to open database: {str(e).strip()}") from e

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        tx = self.begin()
        try:
            tx.execute(sql, params)
            tx.commit()
        except DatabaseError:
            tx.rollback()
            raise

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql, tuple(params) or None)
                rows = cur.fetchall()
            # End the implicit read transaction
            self.conn.rollback()
            return rows
        except psycopg2.Error as e:
            self.conn.rollback()
            raise DatabaseError(str(e).strip()) from e

    def begin(self) -> PostgresTransaction:
        return PostgresTransaction(self.conn)

    def close(self) -> None:
        self.conn.close()
        logger.debug("Closed PostgreSQL connection")
