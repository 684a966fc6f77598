"""
Versioned SQL migrations → schema_migrations bookkeeping → exactly-once apply

Discovers `<version>_<name>.sql` files in a directory, works out which ones
the database has not seen yet and applies them in ascending version order,
each inside its own transaction.
"""

from .exceptions import (
    DatabaseError,
    DuplicateMigrationError,
    MigrationError,
    MigrationLoadError,
)
from .migrations import Migration, MigrationRunner, MigrationState, MigrationStatus

__version__ = "0.1.0"

__all__ = [
    "DatabaseError",
    "DuplicateMigrationError",
    "Migration",
    "MigrationError",
    "MigrationLoadError",
    "MigrationRunner",
    "MigrationState",
    "MigrationStatus",
]
