"""Error hierarchy for statement, transaction and connection failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from localstore.models.statement import Statement


class LocalStoreError(Exception):
    """Base error carrying a message and an optional engine-specific code."""

    def __init__(self, message: str, *, code: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code {self.code})"


class StatementError(LocalStoreError):
    """A single statement failed (constraint violation, syntax error, ...)."""

    def __init__(self, message: str, *, statement: Statement, code: Any = None) -> None:
        super().__init__(message, code=code)
        self.statement = statement

    @classmethod
    def from_exception(cls, exc: BaseException, statement: Statement) -> StatementError:
        """Wrap an engine exception, keeping its native error code."""
        return cls(str(exc) or type(exc).__name__, statement=statement, code=engine_code(exc))


class TransactionError(LocalStoreError):
    """The whole batch failed or was rolled back."""


class ConnectionUnavailable(LocalStoreError):
    """No underlying engine could be opened."""


class ViewAlreadyPopulated(LocalStoreError):
    """A result view received a second result set."""


def engine_code(exc: BaseException) -> Any:
    """Extract the engine error code from a sqlite3 or asyncpg exception."""
    # sqlite3 (3.11+) exposes both the numeric code and its symbolic name
    name = getattr(exc, "sqlite_errorname", None)
    if name is not None:
        return name
    code = getattr(exc, "sqlite_errorcode", None)
    if code is not None:
        return code
    return getattr(exc, "sqlstate", None)
