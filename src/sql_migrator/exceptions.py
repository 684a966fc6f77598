"""
Error taxonomy.

- DatabaseError: connectivity, query and table-creation failures
- MigrationLoadError: the migrations directory or a file cannot be read
- DuplicateMigrationError: two files claim the same version
- MigrationError: a specific migration failed to apply

All of them are fatal to the current run or status check.
"""


class DatabaseError(Exception):
    """Raised when the database cannot be reached or a statement fails."""

    pass


class MigrationLoadError(OSError):
    """Raised when the migrations directory or a migration file cannot be read."""

    pass


class DuplicateMigrationError(ValueError):
    """Raised when more than one migration file uses the same version."""

    def __init__(self, version: int, names: list[str]):
        self.version = version
        self.names = names
        super().__init__(f"duplicate migration version {version}: {', '.join(names)}")


class MigrationError(Exception):
    """Raised when a single migration cannot be applied.

    Carries the migration's version and name, the phase that failed
    (begin, execute, record or commit) and the underlying cause.
    """

    def __init__(self, version: int, name: str, cause: BaseException, phase: str = "execute"):
        self.version = version
        self.name = name
        self.cause = cause
        self.phase = phase
        super().__init__(f"failed to {phase} migration {version} ({name}): {cause}")
