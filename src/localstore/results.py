"""Lazily populated view over the rows of a pending SELECT."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from typing import Any

from localstore.db.backend import ResultSet, Row
from localstore.errors import ViewAlreadyPopulated
from localstore.models.status import Status

logger = logging.getLogger(__name__)

Observer = Callable[["LazyResultView"], Any]


class LazyResultView:
    """Indexable, countable view whose rows arrive after it is returned.

    Starts ``Status.EMPTY`` with no rows and behaves like an empty sequence.
    The transaction's data callback calls ``populate`` exactly once, which
    moves it to ``Status.READY`` and notifies observers. Observe the
    transition with ``add_observer``/``on_ready`` or ``await view.wait()``.
    """

    def __init__(self) -> None:
        self.status = Status.EMPTY
        self.rows: ResultSet | None = None
        self._observers: list[Observer] = []

    @property
    def length(self) -> int:
        return len(self.rows) if self.rows is not None else 0

    @property
    def is_ready(self) -> bool:
        return self.status is Status.READY

    def __len__(self) -> int:
        return self.length

    def at(self, index: int) -> Row | None:
        """Row at ``index``, or None while empty or out of range."""
        if self.rows is None or not 0 <= index < self.length:
            return None
        return self.rows[index]

    def __getitem__(self, index: int) -> Row:
        row = self.at(index)
        if row is None:
            raise IndexError(f"result index {index} out of range")
        return row

    def __iter__(self) -> Iterator[Row]:
        for index in range(self.length):
            yield self.rows[index]  # type: ignore[index]

    def __repr__(self) -> str:
        return f"<LazyResultView status={self.status} length={self.length}>"

    def populate(self, rows: ResultSet) -> None:
        """Attach the delivered result set and publish the READY transition."""
        if self.status is not Status.EMPTY:
            raise ViewAlreadyPopulated("Result view was already populated")
        self.rows = rows
        self.status = Status.READY
        observers, self._observers = self._observers, []
        for observer in observers:
            self._notify(observer)

    def add_observer(self, observer: Observer) -> None:
        """Call ``observer(view)`` when the view becomes ready."""
        self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def on_ready(self, observer: Observer) -> None:
        """Like ``add_observer``, but fires immediately when already ready."""
        if self.is_ready:
            self._notify(observer)
        else:
            self.add_observer(observer)

    async def wait(self) -> LazyResultView:
        """Suspend until the view is ready, then return it."""
        if self.is_ready:
            return self
        future: asyncio.Future[LazyResultView] = asyncio.get_running_loop().create_future()

        def _resolve(view: LazyResultView) -> None:
            if not future.done():
                future.set_result(view)

        self.add_observer(_resolve)
        try:
            return await future
        finally:
            self.remove_observer(_resolve)

    def _notify(self, observer: Observer) -> None:
        try:
            observer(self)
        except Exception:
            logger.exception("Result view observer %r failed", observer)
