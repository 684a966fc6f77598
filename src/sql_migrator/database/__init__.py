"""
Database handles.

Backends:
- postgres: psycopg2
- sqlite: stdlib sqlite3
"""

import logging

from ..config import DatabaseConfig
from .base import Database, Transaction
from .postgres import PostgresDatabase
from .sqlite import SQLiteDatabase, split_statements

logger = logging.getLogger(__name__)

_BACKEND_NAMES = {"postgres": "PostgreSQL", "sqlite": "SQLite"}


def connect(config: DatabaseConfig) -> Database:
    """
    Open the configured database and check that it answers.

    Raises:
        DatabaseError: If the connection cannot be opened or pinged
        ValueError: If the backend is unknown
    """
    if config.backend == "postgres":
        db: Database = PostgresDatabase(config.to_dsn())
    elif config.backend == "sqlite":
        db = SQLiteDatabase(config.path, timeout=float(config.connect_timeout))
    else:
        raise ValueError(f"Unsupported database backend: {config.backend}")

    try:
        db.ping()
    except Exception:
        db.close()
        raise

    logger.info(f"Successfully connected to {_BACKEND_NAMES[config.backend]} database")
    return db


__all__ = [
    "Database",
    "PostgresDatabase",
    "SQLiteDatabase",
    "Transaction",
    "connect",
    "split_statements",
]
