"""PostgreSQL implementation of the Connection protocol.

Uses asyncpg. All statements use ``?`` placeholders, translated to ``$N`` at
execute time. Each statement runs inside its own savepoint so that a failure
stays local to that statement unless the error handler asks to abort.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from localstore.db.backend import ResultSet, notify_callback
from localstore.errors import ConnectionUnavailable, StatementError, TransactionError, engine_code
from localstore.models.statement import placeholder_positions

if TYPE_CHECKING:
    import asyncpg

    from localstore.models.callbacks import TransactionCallbacks
    from localstore.models.statement import Statement

logger = logging.getLogger(__name__)


def _translate_placeholders(sql: str) -> str:
    """Convert ``?`` placeholders to ``$1, $2, ...`` for asyncpg.

    Question marks inside quoted literals or comments are left alone.
    """
    parts: list[str] = []
    start = 0
    for number, position in enumerate(placeholder_positions(sql), start=1):
        parts.append(sql[start:position])
        parts.append(f"${number}")
        start = position + 1
    parts.append(sql[start:])
    return "".join(parts)


def _parse_rowcount(status: str | None) -> int:
    """Parse affected row count from an asyncpg status string.

    Examples: "INSERT 0 1" → 1, "UPDATE 3" → 3, "DELETE 0" → 0.
    """
    if not status:
        return -1
    parts = status.split()
    if len(parts) >= 2:
        try:
            return int(parts[-1])
        except ValueError:
            pass
    return -1


class _Abort(Exception):
    """Raised inside the outer transaction block to force a rollback."""

    def __init__(self, error: StatementError) -> None:
        super().__init__(error.message)
        self.error = error


class PostgresConnection:
    """Runs statement batches against one asyncpg connection."""

    def __init__(self, conn: asyncpg.Connection, *, version: str = "") -> None:
        """Initialize with an open asyncpg connection."""
        self._conn = conn
        self.version = version
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    @classmethod
    async def open(cls, url: str, *, version: str | None = None) -> PostgresConnection:
        """Connect to the server at ``url``."""
        import asyncpg as _asyncpg

        try:
            conn = await _asyncpg.connect(url)
        except (OSError, _asyncpg.PostgresError) as exc:
            raise ConnectionUnavailable(
                f"Cannot connect to PostgreSQL: {exc}", code=engine_code(exc)
            ) from exc
        if not version:
            server = conn.get_server_version()
            version = f"{server.major}.{server.minor}"
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
        """Finish pending batches and close the connection."""
        await self.drain()
        await self._conn.close()

    async def _run(self, statements: list[Statement], callbacks: TransactionCallbacks) -> None:
        import asyncpg as _asyncpg

        async with self._lock:
            try:
                async with self._conn.transaction():
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
                            raise _Abort(error)
            except _Abort as exc:
                notify_callback(
                    callbacks.on_error,
                    TransactionError(
                        f"Transaction rolled back after failed statement: {exc.error.message}",
                        code=exc.error.code,
                    ),
                )
                return
            except (OSError, _asyncpg.PostgresError, _asyncpg.InterfaceError) as exc:
                notify_callback(
                    callbacks.on_error,
                    TransactionError(f"Transaction failed: {exc}", code=engine_code(exc)),
                )
                return

        notify_callback(callbacks.on_success)

    async def _execute(
        self, statement: Statement, callbacks: TransactionCallbacks
    ) -> StatementError | None:
        """Run one statement in a savepoint and hand its rows to ``on_query_data``."""
        try:
            async with self._conn.transaction():
                prepared = await self._conn.prepare(_translate_placeholders(statement.text))
                rows = await prepared.fetch(*statement.parameters)
                result = ResultSet(
                    rows=list(rows), rows_affected=_parse_rowcount(prepared.get_statusmsg())
                )
        except Exception as exc:
            return StatementError.from_exception(exc, statement)

        try:
            callbacks.on_query_data(statement, result)
        except Exception as exc:
            logger.exception("Query data callback failed for %s", statement.text)
            return StatementError.from_exception(exc, statement)
        return None
