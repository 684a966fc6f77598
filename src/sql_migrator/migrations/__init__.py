"""
SQL migrations.

Versioned, ordered SQL files applied exactly once each and tracked in the
`schema_migrations` table.
"""

from .loader import Migration, MigrationLoader, load_migrations
from .observer import LoggingObserver, MigrationObserver
from .runner import MigrationRunner, MigrationState, MigrationStatus, format_status_report
from .tracker import MIGRATIONS_TABLE, AppliedSetTracker, ensure_migrations_table

__all__ = [
    "MIGRATIONS_TABLE",
    "AppliedSetTracker",
    "LoggingObserver",
    "Migration",
    "MigrationLoader",
    "MigrationObserver",
    "MigrationRunner",
    "MigrationState",
    "MigrationStatus",
    "ensure_migrations_table",
    "format_status_report",
    "load_migrations",
]
