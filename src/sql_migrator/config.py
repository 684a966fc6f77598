"""
Configuration management.

All configuration keys live here; the migration core never reads settings
itself and receives an already opened database handle instead.

Key invariants:
- Connection defaults belong to this module only
- Environment variables override the YAML file, which overrides defaults
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from psycopg2.extensions import make_dsn

SUPPORTED_BACKENDS = ("postgres", "sqlite")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class DatabaseConfig:
    """Database connection settings.

    backend selects the driver:
    - postgres: host/port/user/password/dbname/sslmode are used
    - sqlite: only path is used
    """

    backend: str = "postgres"
    host: str = "localhost"
    port: int = 5432
    user: str = "admin"
    password: str = ""
    dbname: str = "appdb"
    sslmode: str = "disable"
    # SQLite database file
    path: Path = field(default_factory=lambda: Path("data/app.db"))
    # Seconds to wait for a connection
    connect_timeout: int = 10

    def to_dsn(self) -> str:
        """Build a libpq connection string for the postgres backend."""
        return make_dsn(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            dbname=self.dbname,
            sslmode=self.sslmode,
            connect_timeout=self.connect_timeout,
        )


@dataclass
class MigrationsConfig:
    """Where migration files are found."""

    directory: Path = field(default_factory=lambda: Path("migrations"))


@dataclass
class Config:
    """Application configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    migrations: MigrationsConfig = field(default_factory=MigrationsConfig)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []
        db = self.database

        if db.backend not in SUPPORTED_BACKENDS:
            errors.append(
                f"database.backend must be one of {', '.join(SUPPORTED_BACKENDS)}, "
                f"got {db.backend!r}"
            )
        elif db.backend == "postgres":
            if not db.host:
                errors.append("database.host is required for postgres")
            if not db.dbname:
                errors.append("database.dbname is required for postgres")
            if not 0 < db.port < 65536:
                errors.append("database.port must be between 1 and 65535")
        elif db.path == Path(""):  # an empty setting normalizes to "."
            errors.append("database.path is required for sqlite")

        if db.connect_timeout < 0:
            errors.append("database.connect_timeout must not be negative")

        return errors


def _env_int(name: str, fallback: int) -> int:
    value = os.environ.get(name, "")
    if not value:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback  # Keep file/default value


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    Environment variables can override config values:
    - MIGRATOR_DB_BACKEND (postgres/sqlite)
    - MIGRATOR_DB_HOST
    - MIGRATOR_DB_PORT
    - MIGRATOR_DB_USER
    - MIGRATOR_DB_PASSWORD
    - MIGRATOR_DB_NAME
    - MIGRATOR_DB_SSLMODE
    - MIGRATOR_DB_PATH (sqlite file)
    - MIGRATOR_MIGRATIONS_DIR

    Raises:
        ConfigValidationError: If the resulting configuration is invalid
    """
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    db_data = data.get("database") or {}
    database = DatabaseConfig(
        backend=os.environ.get("MIGRATOR_DB_BACKEND", db_data.get("backend", "postgres")),
        host=os.environ.get("MIGRATOR_DB_HOST", db_data.get("host", "localhost")),
        port=_env_int("MIGRATOR_DB_PORT", int(db_data.get("port", 5432))),
        user=os.environ.get("MIGRATOR_DB_USER", db_data.get("user", "admin")),
        password=os.environ.get("MIGRATOR_DB_PASSWORD", db_data.get("password") or ""),
        dbname=os.environ.get("MIGRATOR_DB_NAME", db_data.get("dbname", "appdb")),
        sslmode=os.environ.get("MIGRATOR_DB_SSLMODE", db_data.get("sslmode", "disable")),
        path=Path(os.environ.get("MIGRATOR_DB_PATH", db_data.get("path", "data/app.db") or "")),
        connect_timeout=int(db_data.get("connect_timeout", 10)),
    )

    migrations_data = data.get("migrations") or {}
    migrations = MigrationsConfig(
        directory=Path(
            os.environ.get(
                "MIGRATOR_MIGRATIONS_DIR", migrations_data.get("directory", "migrations")
            )
        ),
    )

    config = Config(database=database, migrations=migrations)
    errors = config.validate()
    if errors:
        raise ConfigValidationError("; ".join(errors))
    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# sql-migrator configuration
#
# Environment variables (MIGRATOR_DB_*, MIGRATOR_MIGRATIONS_DIR) override
# the values below.

database:
  backend: "postgres"          # postgres or sqlite
  host: "localhost"
  port: 5432
  user: "admin"
  password: ""                 # Prefer MIGRATOR_DB_PASSWORD
  dbname: "appdb"
  sslmode: "disable"
  connect_timeout: 10          # Seconds
  path: "data/app.db"          # Used by the sqlite backend only

migrations:
  directory: "migrations"      # Holds <version>_<name>.sql files
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
