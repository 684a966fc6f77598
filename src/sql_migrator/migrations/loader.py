"""
Migration loader.

Migrations are plain SQL files named with format: {version}_{name}.sql
E.g., 001_create_users.sql, 2_add_index.sql

- version is a non-negative integer; zero-padding is optional and ordering
  is purely numeric
- the migration name is the filename without .sql, version prefix included
- file content is passed through untouched
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import DuplicateMigrationError, MigrationLoadError

logger = logging.getLogger(__name__)

MIGRATION_SUFFIX = ".sql"
_VERSION_RE = re.compile(r"[0-9]+")
# Largest value a 64-bit signed INTEGER version column holds
MAX_VERSION = 2**63 - 1


@dataclass(frozen=True)
class Migration:
    """A single versioned SQL migration."""

    version: int
    name: str
    content: str


def _iterdir(directory: Path) -> Iterable[Path]:
    return directory.iterdir()


class MigrationLoader:
    """
    Reads a directory of SQL files into Migration records.

    Files that do not follow the naming pattern are skipped with a warning.
    Unreadable directories or files are fatal.
    """

    def __init__(self, list_entries: Callable[[Path], Iterable[Path]] | None = None):
        """
        Args:
            list_entries: Directory enumeration primitive, defaults to Path.iterdir
        """
        self.list_entries = list_entries or _iterdir

    def parse_filename(self, filename: str) -> tuple[int, str] | None:
        """
        Parse `<version>_<name>.sql` into (version, name).

        Returns None when the filename does not follow the pattern.
        """
        prefix, sep, _ = filename.partition("_")
        if not sep:
            logger.warning(f"Skipping file with invalid name format: {filename}")
            return None

        if not _VERSION_RE.fullmatch(prefix):
            logger.warning(f"Skipping file with invalid version number: {filename}")
            return None

        version = int(prefix)
        if version > MAX_VERSION:
            logger.warning(f"Skipping file with version number out of range: {filename}")
            return None

        return version, filename[: -len(MIGRATION_SUFFIX)]

    def load(self, directory: Path | str) -> list[Migration]:
        """
        Load all migrations from a directory.

        Returns migrations sorted by version.

        Raises:
            MigrationLoadError: If the directory or a migration file cannot be read
            DuplicateMigrationError: If two files share a version
        """
        directory = Path(directory)
        try:
            entries = sorted(self.list_entries(directory), key=lambda p: p.name)
        except OSError as e:
            raise MigrationLoadError(
                f"failed to read migrations directory {directory}: {e}"
            ) from e

        migrations = []
        for entry in entries:
            if not entry.name.endswith(MIGRATION_SUFFIX) or entry.is_dir():
                continue

            parsed = self.parse_filename(entry.name)
            if parsed is None:
                continue
            version, name = parsed

            try:
                content = entry.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise MigrationLoadError(
                    f"failed to read migration file {entry.name}: {e}"
                ) from e

            migrations.append(Migration(version=version, name=name, content=content))

        migrations.sort(key=lambda m: m.version)
        self._check_unique(migrations)

        logger.debug(f"Loaded {len(migrations)} migrations from {directory}")
        return migrations

    @staticmethod
    def _check_unique(migrations: list[Migration]) -> None:
        for previous, current in zip(migrations, migrations[1:]):
            if previous.version == current.version:
                names = [m.name for m in migrations if m.version == current.version]
                raise DuplicateMigrationError(current.version, names)


def load_migrations(directory: Path | str) -> list[Migration]:
    """Load migrations from a directory with the default loader."""
    return MigrationLoader().load(directory)
