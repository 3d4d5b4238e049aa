"""Engine protocol: a connection that runs statement batches atomically.

A connection never blocks its caller. ``transaction`` schedules the batch on
the running event loop and reports every outcome through the callback bundle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from localstore.models.callbacks import TransactionCallbacks
    from localstore.models.statement import Statement

logger = logging.getLogger(__name__)


@runtime_checkable
class Row(Protocol):
    """A database row supporting both named and positional access."""

    def __getitem__(self, key: str | int) -> Any:
        """Get a column value by name or position."""
        ...

    def keys(self) -> Any:
        """Return column names."""
        ...


@dataclass
class ResultSet:
    """Rows and counters delivered by the engine for one statement."""

    rows: Sequence[Row] = field(default_factory=list)
    rows_affected: int = -1
    insert_id: int | None = None

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def item(self, index: int) -> Row | None:
        """Row at ``index``, or None when out of range."""
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None


@runtime_checkable
class Connection(Protocol):
    """Transactional, callback-based engine connection."""

    version: str

    def transaction(self, statements: list[Statement], callbacks: TransactionCallbacks) -> None:
        """Schedule ``statements`` as one atomic batch; return immediately."""
        ...

    async def drain(self) -> None:
        """Wait until every scheduled batch has finished."""
        ...

    async def close(self) -> None:
        """Finish pending batches and close the connection."""
        ...


def notify_callback(callback: Callable[..., Any], *args: Any) -> None:
    """Call a user callback, logging rather than propagating its failure."""
    try:
        callback(*args)
    except Exception:
        logger.exception("Transaction callback %r failed", callback)
