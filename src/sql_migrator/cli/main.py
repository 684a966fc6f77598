"""
CLI main entry point.
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..database import connect
from ..exceptions import (
    DatabaseError,
    DuplicateMigrationError,
    MigrationError,
    MigrationLoadError,
)
from ..migrations import MigrationRunner, MigrationState, format_status_report

logger = logging.getLogger(__name__)

# Errors that end a command with exit code 1 instead of a traceback
RUN_ERRORS = (DatabaseError, MigrationLoadError, DuplicateMigrationError, MigrationError)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="sql-migrator",
        description="Apply version-numbered SQL migration files to a database",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # migrate command
    migrate_parser = subparsers.add_parser("migrate", help="Apply all pending migrations")
    migrate_parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Migrations directory (default: migrations.directory from config)",
    )

    # status command
    status_parser = subparsers.add_parser(
        "status", help="Show which migrations are applied or pending"
    )
    status_parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Migrations directory (default: migrations.directory from config)",
    )

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file",
    )

    return parser


def cmd_migrate(config: Config, directory: Path | None = None) -> int:
    """Apply pending migrations, then show the status report."""
    directory = directory or config.migrations.directory

    try:
        with connect(config.database) as db:
            runner = MigrationRunner(db)
            applied = runner.run(directory)
            statuses = runner.log_status(directory)
    except RUN_ERRORS as e:
        logger.error(f"Failed to run migrations: {e}")
        print(f"❌ Migration failed: {e}")
        return 1

    pending = sum(1 for s in statuses if s.state == MigrationState.PENDING)
    print(f"✓ Applied {len(applied)} migration(s), {pending} pending")
    return 0


def cmd_status(config: Config, directory: Path | None = None) -> int:
    """Print the migration status report."""
    directory = directory or config.migrations.directory

    try:
        with connect(config.database) as db:
            statuses = MigrationRunner(db).status(directory)
    except RUN_ERRORS as e:
        logger.error(f"Failed to get migration status: {e}")
        print(f"❌ Failed to get migration status: {e}")
        return 1

    print("Migration Status:")
    print("================")
    for line in format_status_report(statuses):
        print(line)

    return 0


def cmd_init_config(config_path: Path, force: bool = False) -> int:
    """Write the default configuration file."""
    if config_path.exists() and not force:
        print(f"⚠️  {config_path} already exists (use --force to overwrite)")
        return 1

    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config, parsed.force)

    # Load config
    try:
        config = load_config(parsed.config)
    except (ConfigValidationError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    if parsed.command == "migrate":
        return cmd_migrate(config, parsed.dir)
    elif parsed.command == "status":
        return cmd_status(config, parsed.dir)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
