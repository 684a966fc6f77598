"""
Migration runner.

Applies pending migrations in ascending version order. Each migration runs
in its own transaction together with its bookkeeping row, so a migration is
either fully applied and recorded or not at all. The first failure aborts
the run; migrations committed before it stay applied and are skipped next
time.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..database import Database, Transaction
from ..exceptions import DatabaseError, MigrationError
from .loader import Migration, MigrationLoader
from .observer import LoggingObserver, MigrationObserver
from .tracker import AppliedSetTracker, ensure_migrations_table

logger = logging.getLogger(__name__)


class MigrationState(str, Enum):
    """Whether a migration has been recorded as applied."""

    APPLIED = "APPLIED"
    PENDING = "PENDING"


@dataclass
class MigrationStatus:
    """Status line of a single migration."""

    version: int
    name: str
    state: MigrationState

    @property
    def line(self) -> str:
        return f"Version {self.version}: {self.name} [{self.state.value}]"


def format_status_report(statuses: list[MigrationStatus]) -> list[str]:
    """Render statuses as `Version <n>: <name> [<APPLIED|PENDING>]` lines."""
    return [status.line for status in statuses]


class MigrationRunner:
    """
    Runs SQL migrations from a directory against a database.

    The database handle is owned by the caller; the runner only opens one
    transaction per migration and always ends it (commit or rollback).
    """

    def __init__(
        self,
        db: Database,
        loader: MigrationLoader | None = None,
        tracker: AppliedSetTracker | None = None,
        observer: MigrationObserver | None = None,
    ):
        """
        Args:
            db: Open database handle
            loader: Migration loader (default: MigrationLoader())
            tracker: Applied-set tracker (default: AppliedSetTracker(db))
            observer: Receives run progress (default: LoggingObserver())
        """
        self.db = db
        self.loader = loader or MigrationLoader()
        self.tracker = tracker or AppliedSetTracker(db)
        self.observer = observer or LoggingObserver()

    def run(self, directory: Path | str) -> list[int]:
        """
        Apply all pending migrations from a directory.

        Returns list of migration versions applied by this run.

        Raises:
            DatabaseError: If the migrations table cannot be created or read
            MigrationLoadError: If the directory or a file cannot be read
            DuplicateMigrationError: If two files share a version
            MigrationError: If a migration fails; later migrations are not run
        """
        ensure_migrations_table(self.db)

        migrations = self.loader.load(directory)
        if not migrations:
            self.observer.no_migrations(str(directory))
            return []

        applied = self.tracker.applied_versions()

        applied_versions = []
        for migration in migrations:
            if migration.version in applied:
                self.observer.skipped(migration)
                continue

            try:
                self._apply(migration)
            except MigrationError as e:
                self.observer.failed(migration, e)
                raise

            applied_versions.append(migration.version)

        self.observer.completed(applied_versions)
        return applied_versions

    def _apply(self, migration: Migration) -> None:
        """Apply one migration and record it in the same transaction."""
        self.observer.applying(migration)

        try:
            tx = self.db.begin()
        except DatabaseError as e:
            raise MigrationError(migration.version, migration.name, e, phase="begin") from e

        try:
            try:
                tx.execute_script(migration.content)
            except DatabaseError as e:
                raise MigrationError(migration.version, migration.name, e, phase="execute") from e

            try:
                self.tracker.record(tx, migration)
            except DatabaseError as e:
                raise MigrationError(migration.version, migration.name, e, phase="record") from e

            try:
                tx.commit()
            except DatabaseError as e:
                raise MigrationError(migration.version, migration.name, e, phase="commit") from e
        except BaseException:
            self._rollback(tx, migration)
            raise

        self.observer.applied(migration)

    @staticmethod
    def _rollback(tx: Transaction, migration: Migration) -> None:
        try:
            tx.rollback()
        except DatabaseError as e:
            # The failure that triggered the rollback is re-raised by the caller
            logger.warning(f"Rollback of migration {migration.version} failed: {e}")

    def status(self, directory: Path | str) -> list[MigrationStatus]:
        """
        Report every migration in the directory as APPLIED or PENDING.

        Read-only: the migrations table is not created, so the query fails
        with DatabaseError when it does not exist yet.
        """
        migrations = self.loader.load(directory)
        applied = self.tracker.applied_versions()

        return [
            MigrationStatus(
                version=m.version,
                name=m.name,
                state=MigrationState.APPLIED if m.version in applied else MigrationState.PENDING,
            )
            for m in migrations
        ]

    def log_status(self, directory: Path | str) -> list[MigrationStatus]:
        """Log the status report and return it."""
        statuses = self.status(directory)

        logger.info("Migration Status:")
        logger.info("================")
        for line in format_status_report(statuses):
            logger.info(line)

        return statuses
