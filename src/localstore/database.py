"""Database: create, find, insert, update and destroy over one connection.

Conditions (``where``, ``changes``, ``values``) may be given as:

- a string: ``"firstName = 'Peter'"``
- a ``[text, params]`` pair: ``["firstName = ?", ["Peter"]]``
- a mapping: ``{"firstName": "Peter"}``

Writes return nothing; reads return a LazyResultView that fills in once the
engine delivers rows. Outcomes are reported through transaction callbacks.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from localstore.config import get_db_size
from localstore.db.backend import Connection, ResultSet
from localstore.db.connection import open_connection
from localstore.errors import ConnectionUnavailable
from localstore.executor import CallbacksLike, TransactionExecutor, suppress_errors
from localstore.models.callbacks import TransactionCallbacks
from localstore.models.statement import Statement
from localstore.results import LazyResultView
from localstore.sql import builder

logger = logging.getLogger(__name__)


def default_name() -> str:
    """Generate a database name for callers that do not supply one."""
    return f"db{uuid.uuid4().hex[:12]}"


class Database:
    """One named database backed by exactly one engine connection."""

    def __init__(
        self,
        connection: Connection | None,
        *,
        name: str,
        size: int | None = None,
        version: str = "",
    ) -> None:
        """Wrap an already-open connection (None when the engine is unavailable)."""
        self.name = name
        self.size = size
        self.version = version
        self._connection = connection
        self._executor = TransactionExecutor(connection)

    @classmethod
    async def open(
        cls, name: str | None = None, *, size: int | None = None, version: str | None = None
    ) -> Database:
        """Open the database, generating a name when none is given.

        If the engine cannot be opened the failure is logged once and the
        returned instance treats every operation as a no-op.
        """
        name = name or default_name()
        size = size if size is not None else get_db_size()
        try:
            connection = await open_connection(name, size=size, version=version)
        except ConnectionUnavailable as exc:
            logger.error("Database %s unavailable: %s", name, exc)
            return cls(None, name=name, size=size, version=version or "")
        return cls(connection, name=name, size=size, version=version or connection.version)

    @property
    def available(self) -> bool:
        return self._connection is not None

    async def __aenter__(self) -> Database:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def transaction(self, statements: Any, callbacks: CallbacksLike = None) -> None:
        """Run one statement or a list of statements as a single transaction.

        Each statement may be a Statement, a SQL string, or a
        ``[text, params]`` pair. ``callbacks`` (all optional):

        - ``on_success()``: the transaction committed
        - ``on_error(error)``: the transaction failed or was rolled back
        - ``on_query_data(statement, result_set)``: rows for each statement
        - ``on_query_error(statement, error)``: one statement failed; return
          ``ErrorAction.ABORT`` to roll the whole batch back
        """
        self._executor.run(statements, callbacks)

    def create_table(self, table: str, fields: Mapping[str, str]) -> None:
        """Create ``table``; ``fields`` maps column name to its definition.

        An existing table is not an error: statement failures are logged at
        DEBUG and otherwise ignored.
        """
        statement = builder.create_table(table, fields)
        self._log(statement)
        self.transaction(statement, TransactionCallbacks(on_query_error=suppress_errors))

    def find(self, table: str, where: Any = None) -> LazyResultView:
        """Select rows from ``table``; the returned view fills in later."""
        statement = builder.select(table, where)
        self._log(statement)
        view = LazyResultView()

        def _populate(_statement: Statement, result_set: ResultSet) -> None:
            view.populate(result_set)

        self.transaction(statement, TransactionCallbacks(on_query_data=_populate))
        return view

    def insert(self, table: str, values: Any) -> None:
        """Insert a row from a mapping, or a list matching the column order."""
        statement = builder.insert(table, values)
        self._log(statement)
        self.transaction(statement)

    def update(self, table: str, changes: Any, where: Any = None) -> None:
        """Apply ``changes`` to the rows of ``table`` matching ``where``."""
        statement = builder.update(table, changes, where)
        self._log(statement)
        self.transaction(statement)

    def destroy(self, table: str, where: Any = None) -> None:
        """Delete the rows of ``table`` matching ``where``."""
        statement = builder.destroy(table, where)
        self._log(statement)
        self.transaction(statement)

    async def drain(self) -> None:
        """Wait for every submitted transaction to finish."""
        if self._connection is not None:
            await self._connection.drain()

    async def close(self) -> None:
        """Finish pending transactions and close the connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._executor = TransactionExecutor(None)

    def _log(self, statement: Statement) -> None:
        logger.debug("%s %s", statement.text, statement.parameters)
