"""
Applied-migration bookkeeping.

Applied migrations are tracked in the `schema_migrations` table. A version
present there is never applied again.
"""

import logging

from ..database import Database, Transaction
from ..exceptions import DatabaseError
from .loader import Migration

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "schema_migrations"

CREATE_MIGRATIONS_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (
    version INTEGER PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


def ensure_migrations_table(db: Database) -> None:
    """Create the migrations tracking table if it doesn't exist."""
    try:
        db.execute(CREATE_MIGRATIONS_TABLE_SQL)
    except DatabaseError as e:
        raise DatabaseError(f"failed to create migrations table: {e}") from e


class AppliedSetTracker:
    """Reads and writes the set of applied migration versions."""

    def __init__(self, db: Database):
        self.db = db

    def applied_versions(self) -> set[int]:
        """
        Get set of applied migration versions.

        The migrations table must already exist.

        Raises:
            DatabaseError: If the query fails or a row cannot be decoded
        """
        try:
            rows = self.db.query(f"SELECT version FROM {MIGRATIONS_TABLE} ORDER BY version")
        except DatabaseError as e:
            raise DatabaseError(f"failed to get applied migrations: {e}") from e

        applied = set()
        for row in rows:
            try:
                applied.add(int(row[0]))
            except (TypeError, ValueError, IndexError) as e:
                raise DatabaseError(f"failed to scan migration version {row!r}: {e}") from e
        return applied

    def record(self, tx: Transaction, migration: Migration) -> None:
        """Record a migration as applied inside the caller's transaction."""
        marker = self.db.placeholder
        tx.execute(
            f"INSERT INTO {MIGRATIONS_TABLE} (version, name) VALUES ({marker}, {marker})",
            (migration.version, migration.name),
        )
