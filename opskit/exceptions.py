"""
Custom exception hierarchy for opskit.

Provides clear, specific exceptions for the operations that signal
faults instead of returning a structured result.

Hierarchy:

    OpskitError (base)
    ├── OperationalError   environmental, caller may retry
    │   ├── ProcessSpawnError
    │   └── ProcessTimeoutError
    └── DataError          bad input or bad file state
        ├── ValidationError
        └── FileOperationError
            ├── SourceNotFoundError
            ├── DestinationUnavailableError
            └── EnvFileError

Rules:
    - Database and key-value checks never raise these; they return a
      result value (PgResponse / status string).
    - Filesystem, conversion and process helpers raise them and chain
      the underlying error with ``raise ... from``.
"""


class OpskitError(Exception):
    """Base exception for all opskit errors."""
    pass


# ============ OPERATIONAL (environmental) ============

class OperationalError(OpskitError):
    """Environmental failure: process could not start, took too long, etc."""
    pass


class ProcessSpawnError(OperationalError):
    """Raised when the shell for a script could not be started."""
    pass


class ProcessTimeoutError(OperationalError):
    """Raised when a script exceeds its timeout. The process is killed first."""

    def __init__(self, message: str, timeout: float):
        super().__init__(message)
        self.timeout = timeout


# ============ DATA (bad input / file state) ============

class DataError(OpskitError):
    """Bad input or a file in an unusable state."""
    pass


class ValidationError(DataError):
    """Raised when input fails validation (bad JSON, bad keys, ...)."""
    pass


class FileOperationError(DataError):
    """Raised when a filesystem operation fails."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class SourceNotFoundError(FileOperationError):
    """Copy source does not exist or is not a regular file."""
    pass


class DestinationUnavailableError(FileOperationError):
    """Copy destination directory is missing and creation was not allowed."""
    pass


class EnvFileError(FileOperationError):
    """Env file could not be read or written."""
    pass
