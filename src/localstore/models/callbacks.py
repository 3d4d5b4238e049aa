"""Callback bundle for a transaction request, with documented defaults."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any

from localstore.models.status import ErrorAction

if TYPE_CHECKING:
    from localstore.db.backend import ResultSet
    from localstore.errors import StatementError, TransactionError
    from localstore.models.statement import Statement

logger = logging.getLogger("localstore")

QueryDataCallback = Callable[["Statement", "ResultSet"], Any]
QueryErrorCallback = Callable[["Statement", "StatementError"], "ErrorAction | None"]
SuccessCallback = Callable[[], Any]
ErrorCallback = Callable[["TransactionError"], Any]


def _ignore_query_data(statement: Statement, result_set: ResultSet) -> None:
    pass


def _log_query_error(statement: Statement, error: StatementError) -> ErrorAction:
    logger.error("SQL error: %s (code %s) in %s", error.message, error.code, statement.text)
    return ErrorAction.CONTINUE


def _ignore_success() -> None:
    pass


def _log_transaction_error(error: TransactionError) -> None:
    logger.error("SQL transaction failed: %s", error)


@dataclass(frozen=True)
class TransactionCallbacks:
    """Every callback a transaction can fire. ``None`` means use the default.

    Defaults: ``on_query_data`` and ``on_success`` do nothing;
    ``on_query_error`` logs and continues the batch; ``on_error`` logs.
    """

    on_query_data: QueryDataCallback | None = None
    on_query_error: QueryErrorCallback | None = None
    on_success: SuccessCallback | None = None
    on_error: ErrorCallback | None = None

    @classmethod
    def from_value(
        cls, value: TransactionCallbacks | Mapping[str, Any] | None
    ) -> TransactionCallbacks:
        """Build from None, an instance, or a mapping of callback names."""
        if value is None:
            return cls()
        if isinstance(value, TransactionCallbacks):
            return value
        known = {f.name for f in fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise TypeError(f"Unknown transaction callbacks: {', '.join(sorted(unknown))}")
        return cls(**value)

    def resolved(self) -> TransactionCallbacks:
        """Return a copy with every missing callback filled by its default."""
        return replace(
            self,
            on_query_data=self.on_query_data or _ignore_query_data,
            on_query_error=self.on_query_error or _log_query_error,
            on_success=self.on_success or _ignore_success,
            on_error=self.on_error or _log_transaction_error,
        )

    def should_abort(self, statement: Statement, error: StatementError) -> bool:
        """Run the statement error handler and report whether to roll back."""
        handler = self.on_query_error or _log_query_error
        return handler(statement, error) == ErrorAction.ABORT
