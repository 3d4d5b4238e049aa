"""Submit statement batches to a connection with merged callbacks."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from localstore.models.callbacks import TransactionCallbacks
from localstore.models.statement import Statement
from localstore.models.status import ErrorAction

if TYPE_CHECKING:
    from localstore.db.backend import Connection
    from localstore.errors import StatementError

logger = logging.getLogger(__name__)

CallbacksLike = TransactionCallbacks | Mapping[str, Any] | None


def as_statements(statements: Any) -> list[Statement]:
    """Coerce one statement-like, or a list/tuple of them, into Statements.

    A single ``Statement`` or SQL string becomes a one-element batch. A list
    or tuple is always a batch, so a lone ``[text, params]`` pair must be
    wrapped: ``[["SELECT ... WHERE id = ?", [1]]]``.
    """
    if isinstance(statements, (Statement, str)):
        return [Statement.coerce(statements)]
    if isinstance(statements, (list, tuple)):
        return [Statement.coerce(item) for item in statements]
    raise TypeError(f"Cannot build a statement batch from {statements!r}")


def suppress_errors(statement: Statement, error: StatementError) -> ErrorAction:
    """Statement error handler that logs at DEBUG and keeps the batch going."""
    logger.debug("Suppressed SQL error: %s in %s", error, statement.text)
    return ErrorAction.CONTINUE


class TransactionExecutor:
    """Runs batches as one atomic request; never blocks the caller.

    With no connection (the engine was unavailable) every run is a no-op.
    """

    def __init__(self, connection: Connection | None) -> None:
        self.connection = connection

    def run(self, statements: Any, callbacks: CallbacksLike = None) -> None:
        """Submit ``statements`` with ``callbacks`` merged over the defaults."""
        batch = as_statements(statements)
        resolved = TransactionCallbacks.from_value(callbacks).resolved()
        if self.connection is None:
            logger.warning("No database connection; dropping %d statement(s)", len(batch))
            return
        self.connection.transaction(batch, resolved)
