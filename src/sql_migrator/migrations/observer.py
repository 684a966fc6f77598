"""
Run observers.

The runner reports every decision (skip, apply, fail) to an observer
instead of logging directly, so callers and tests can follow a run without
capturing log output.
"""

import logging

from .loader import Migration


class MigrationObserver:
    """Base observer. Every hook is a no-op."""

    def no_migrations(self, directory: str) -> None:
        pass

    def skipped(self, migration: Migration) -> None:
        pass

    def applying(self, migration: Migration) -> None:
        pass

    def applied(self, migration: Migration) -> None:
        pass

    def failed(self, migration: Migration, error: Exception) -> None:
        pass

    def completed(self, applied_versions: list[int]) -> None:
        pass


class LoggingObserver(MigrationObserver):
    """Reports run progress through the logging module."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("sql_migrator.migrations")

    def no_migrations(self, directory: str) -> None:
        self.logger.info(f"No migration files found in {directory}")

    def skipped(self, migration: Migration) -> None:
        self.logger.info(
            f"Migration {migration.version} ({migration.name}) already applied, skipping"
        )

    def applying(self, migration: Migration) -> None:
        self.logger.info(f"Applying migration {migration.version}: {migration.name}")

    def applied(self, migration: Migration) -> None:
        self.logger.info(
            f"Successfully applied migration {migration.version}: {migration.name}"
        )

    def failed(self, migration: Migration, error: Exception) -> None:
        self.logger.error(f"Migration {migration.version} ({migration.name}) failed: {error}")

    def completed(self, applied_versions: list[int]) -> None:
        if applied_versions:
            self.logger.info(
                f"Applied {len(applied_versions)} migrations: {applied_versions}"
            )
        self.logger.info("All migrations completed successfully")
