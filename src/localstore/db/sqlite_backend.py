"""SQLite implementation of the Connection protocol.

Wraps an aiosqlite.Connection opened in autocommit mode so that every batch
can be bracketed with explicit ``BEGIN``/``COMMIT``/``ROLLBACK``. Batches run
as event-loop tasks, one at a time and in submission order.
"""

from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite

from localstore.db.backend import ResultSet, notify_callback
from localstore.errors import ConnectionUnavailable, StatementError, TransactionError, engine_code

if TYPE_CHECKING:
    from localstore.models.callbacks import TransactionCallbacks
    from localstore.models.statement import Statement

logger = logging.getLogger(__name__)


class SQLiteConnection:
    """Runs statement batches against one aiosqlite connection.

    The raw connection is exposed as ``_conn`` for SQLite-specific setup
    (PRAGMA) that only runs while opening.
    """

    def __init__(self, conn: aiosqlite.Connection, *, version: str = "") -> None:
        """Initialize with an open aiosqlite connection."""
        self._conn = conn
        self.version = version
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    @classmethod
    async def open(
        cls, path: Path | str, *, size: int | None = None, version: str | None = None
    ) -> SQLiteConnection:
        """Open (creating if needed) the database file at ``path``.

        ``size`` caps the file at roughly that many bytes. ``version`` is
        stored in ``PRAGMA user_version`` when it is an integer string; when
        omitted the stored value is read back instead.
        """
        path = str(path)
        try:
            if path != ":memory:":
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(path, isolation_level=None)
        except (OSError, aiosqlite.Error) as exc:
            raise ConnectionUnavailable(
                f"Cannot open SQLite database at {path}: {exc}", code=engine_code(exc)
            ) from exc

        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute("PRAGMA foreign_keys=ON")
            if path != ":memory:":
                await conn.execute("PRAGMA journal_mode=WAL")
            if size:
                await _apply_quota(conn, size)
            version = await _sync_version(conn, version)
        except aiosqlite.Error as exc:
            await conn.close()
            raise ConnectionUnavailable(
                f"Cannot configure SQLite database at {path}: {exc}", code=engine_code(exc)
            ) from exc

        logger.debug("Opened SQLite database %s (version %r)", path, version)
        return cls(conn, version=version)

    def transaction(self, statements: list[Statement], callbacks: TransactionCallbacks) -> None:
        """Schedule ``statements`` as one atomic batch on the running loop."""
        task = asyncio.get_running_loop().create_task(
            self._run(list(statements), callbacks.resolved())
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait until every scheduled batch has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Finish pending batches and close the database connection."""
        await self.drain()
        await self._conn.close()

    async def _run(self, statements: list[Statement], callbacks: TransactionCallbacks) -> None:
        async with self._lock:
            try:
                await self._conn.execute("BEGIN")
            except aiosqlite.Error as exc:
                notify_callback(
                    callbacks.on_error,
                    TransactionError(f"Cannot begin transaction: {exc}", code=engine_code(exc)),
                )
                return

            try:
                committed = await self._run_statements(statements, callbacks)
            except BaseException:
                await self._rollback()
                raise

        if committed:
            notify_callback(callbacks.on_success)

    async def _run_statements(
        self, statements: list[Statement], callbacks: TransactionCallbacks
    ) -> bool:
        """Execute the open transaction's statements; True once committed."""
        for statement in statements:
            error = await self._execute(statement, callbacks)
            if error is None:
                continue
            try:
                abort = callbacks.should_abort(statement, error)
            except Exception:
                logger.exception("Statement error handler raised; rolling back")
                abort = True
            if abort:
                await self._rollback()
                notify_callback(
                    callbacks.on_error,
                    TransactionError(
                        f"Transaction rolled back after failed statement: {error.message}",
                        code=error.code,
                    ),
                )
                return False

        try:
            await self._conn.execute("COMMIT")
        except aiosqlite.Error as exc:
            await self._rollback()
            notify_callback(
                callbacks.on_error,
                TransactionError(f"Cannot commit transaction: {exc}", code=engine_code(exc)),
            )
            return False
        return True

    async def _execute(
        self, statement: Statement, callbacks: TransactionCallbacks
    ) -> StatementError | None:
        """Run one statement and hand its rows to ``on_query_data``."""
        try:
            cursor = await self._conn.execute(statement.text, statement.parameters)
            rows = await cursor.fetchall()
            result = ResultSet(
                rows=list(rows),
                rows_affected=cursor.rowcount,
                insert_id=cursor.lastrowid if _is_insert(statement) else None,
            )
            await cursor.close()
        except Exception as exc:
            return StatementError.from_exception(exc, statement)

        try:
            callbacks.on_query_data(statement, result)
        except Exception as exc:
            logger.exception("Query data callback failed for %s", statement.text)
            return StatementError.from_exception(exc, statement)
        return None

    async def _rollback(self) -> None:
        try:
            await self._conn.execute("ROLLBACK")
        except aiosqlite.Error:
            # SQLite may already have rolled back on its own (e.g. SQLITE_FULL)
            logger.debug("ROLLBACK had no active transaction")


def _is_insert(statement: Statement) -> bool:
    return statement.text.lstrip().upper().startswith("INSERT")


async def _apply_quota(conn: aiosqlite.Connection, size: int) -> None:
    """Cap the database at ``size`` bytes via ``max_page_count``."""
    cursor = await conn.execute("PRAGMA page_size")
    row = await cursor.fetchone()
    page_size = row[0] if row else 4096
    await conn.execute(f"PRAGMA max_page_count={math.ceil(size / page_size)}")


async def _sync_version(conn: aiosqlite.Connection, version: str | None) -> str:
    """Store an integer version in ``user_version`` or read the stored one."""
    if version:
        if version.isdigit():
            await conn.execute(f"PRAGMA user_version={int(version)}")
        return version
    cursor = await conn.execute("PRAGMA user_version")
    row = await cursor.fetchone()
    return str(row[0]) if row else ""
