"""Test fixtures and utilities."""

from collections.abc import Callable
from pathlib import Path

import pytest
from fixtures import RecordingObserver

from sql_migrator.database import SQLiteDatabase


@pytest.fixture
def temp_db(tmp_path) -> Path:
    """Temporary database path for testing."""
    return tmp_path / "test_migrations.db"


@pytest.fixture
def db(temp_db):
    """Open SQLite handle on the temporary database."""
    database = SQLiteDatabase(temp_db)
    yield database
    database.close()


@pytest.fixture
def migrations_dir(tmp_path) -> Path:
    """Empty migrations directory."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    return directory


@pytest.fixture
def write_migration(migrations_dir) -> Callable[[str, str], Path]:
    """Write a file into the migrations directory."""

    def _write(filename: str, content: str) -> Path:
        path = migrations_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()
