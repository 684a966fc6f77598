"""
Test fixtures for migration runs.

This module provides:
- SQL bodies for the common scenarios (init, seed, broken)
- sample_migrations/, a small ready-made migrations directory
- RecordingObserver, which collects runner events
"""

from pathlib import Path

from sql_migrator.migrations import Migration, MigrationObserver

FIXTURES_DIR = Path(__file__).parent
SAMPLE_MIGRATIONS_DIR = FIXTURES_DIR / "sample_migrations"

INIT_SQL = "CREATE TABLE t(id int)"
SEED_SQL = "INSERT INTO t VALUES (1)"
BAD_SQL = "THIS IS NOT SQL;"


def load_fixture(name: str) -> str:
    """Load a fixture file as string."""
    filepath = FIXTURES_DIR / name
    return filepath.read_text(encoding="utf-8")


class RecordingObserver(MigrationObserver):
    """Collects runner events as (event, detail) tuples."""

    def __init__(self):
        self.events: list[tuple] = []

    def no_migrations(self, directory: str) -> None:
        self.events.append(("no_migrations", directory))

    def skipped(self, migration: Migration) -> None:
        self.events.append(("skipped", migration.version))

    def applying(self, migration: Migration) -> None:
        self.events.append(("applying", migration.version))

    def applied(self, migration: Migration) -> None:
        self.events.append(("applied", migration.version))

    def failed(self, migration: Migration, error: Exception) -> None:
        self.events.append(("failed", migration.version))

    def completed(self, applied_versions: list[int]) -> None:
        self.events.append(("completed", tuple(applied_versions)))
