"""Tests for configuration loading."""

from pathlib import Path

import pytest

from sql_migrator.config import (
    Config,
    ConfigValidationError,
    DatabaseConfig,
    create_default_config,
    load_config,
)

ENV_VARS = [
    "MIGRATOR_DB_BACKEND",
    "MIGRATOR_DB_HOST",
    "MIGRATOR_DB_PORT",
    "MIGRATOR_DB_USER",
    "MIGRATOR_DB_PASSWORD",
    "MIGRATOR_DB_NAME",
    "MIGRATOR_DB_SSLMODE",
    "MIGRATOR_DB_PATH",
    "MIGRATOR_MIGRATIONS_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for YAML + environment loading."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")

        assert config.database == DatabaseConfig()
        assert config.database.host == "localhost"
        assert config.database.port == 5432
        assert config.migrations.directory == Path("migrations")

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "database:\n"
            "  backend: sqlite\n"
            "  path: /var/lib/app/app.db\n"
            "migrations:\n"
            "  directory: db/migrations\n"
        )

        config = load_config(path)

        assert config.database.backend == "sqlite"
        assert config.database.path == Path("/var/lib/app/app.db")
        assert config.migrations.directory == Path("db/migrations")

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("database:\n  host: from-file\n  port: 6000\n")
        monkeypatch.setenv("MIGRATOR_DB_HOST", "from-env")
        monkeypatch.setenv("MIGRATOR_DB_PORT", "6543")
        monkeypatch.setenv("MIGRATOR_DB_PASSWORD", "secret")
        monkeypatch.setenv("MIGRATOR_MIGRATIONS_DIR", "/srv/migrations")

        config = load_config(path)

        assert config.database.host == "from-env"
        assert config.database.port == 6543
        assert config.database.password == "secret"
        assert config.migrations.directory == Path("/srv/migrations")

    def test_invalid_env_port_keeps_file_value(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("database:\n  port: 6000\n")
        monkeypatch.setenv("MIGRATOR_DB_PORT", "not-a-port")

        assert load_config(path).database.port == 6000

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    @pytest.mark.parametrize("value", ["\"\"", ""])
    def test_empty_sqlite_path_rejected(self, tmp_path, value):
        path = tmp_path / "config.yaml"
        path.write_text(f"database:\n  backend: sqlite\n  path: {value}\n")

        with pytest.raises(ConfigValidationError, match="database.path"):
            load_config(path)

    def test_empty_env_sqlite_path_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MIGRATOR_DB_BACKEND", "sqlite")
        monkeypatch.setenv("MIGRATOR_DB_PATH", "")

        with pytest.raises(ConfigValidationError, match="database.path"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_backend_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MIGRATOR_DB_BACKEND", "oracle")

        with pytest.raises(ConfigValidationError, match="database.backend"):
            load_config(tmp_path / "missing.yaml")


class TestValidate:
    """Tests for Config.validate."""

    def test_defaults_valid(self):
        assert Config().validate() == []

    def test_postgres_requires_host_and_dbname(self):
        config = Config(database=DatabaseConfig(host="", dbname=""))

        errors = config.validate()

        assert "database.host is required for postgres" in errors
        assert "database.dbname is required for postgres" in errors

    def test_port_range(self):
        errors = Config(database=DatabaseConfig(port=70000)).validate()
        assert errors == ["database.port must be between 1 and 65535"]

    def test_sqlite_ignores_postgres_settings(self):
        config = Config(database=DatabaseConfig(backend="sqlite", host="", port=0))
        assert config.validate() == []

    def test_sqlite_requires_path(self):
        config = Config(database=DatabaseConfig(backend="sqlite", path=Path("")))
        assert config.validate() == ["database.path is required for sqlite"]


class TestDsn:
    """Tests for the libpq connection string."""

    def test_to_dsn(self):
        dsn = DatabaseConfig(host="db", port=5433, user="app", dbname="prod").to_dsn()

        assert "host=db" in dsn
        assert "port=5433" in dsn
        assert "user=app" in dsn
        assert "dbname=prod" in dsn
        assert "sslmode=disable" in dsn

    def test_password_with_spaces_is_quoted(self):
        dsn = DatabaseConfig(password="two words").to_dsn()
        assert "password='two words'" in dsn


class TestDefaultConfig:
    """Tests for the generated config file."""

    def test_default_file_loads_as_defaults(self, tmp_path):
        path = tmp_path / "conf" / "config.yaml"

        create_default_config(path)

        assert path.exists()
        assert load_config(path) == Config()
