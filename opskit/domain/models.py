"""
Result models returned by opskit operations.

Both are immutable value objects; nothing here is persisted.
"""
from dataclasses import asdict, dataclass

from opskit.constants import PG_SUCCESS_CODE


@dataclass(frozen=True)
class PgResponse:
    """
    Outcome of a PostgreSQL operation.

    ``code`` is ``"00000"`` on success, the server SQLSTATE when PostgreSQL
    rejected the statement, or ``"unknown"`` for client-side failures.
    """
    code: str
    message: str

    @property
    def ok(self) -> bool:
        return self.code == PG_SUCCESS_CODE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProcessOutput:
    """Exit status and captured streams of a finished script."""
    status: int
    stdout: str
    stderr: str

    def to_dict(self) -> dict:
        return asdict(self)
