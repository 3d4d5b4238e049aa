"""Open the engine connection behind a Database."""

import logging
from pathlib import Path

from localstore.config import get_data_dir, get_database_url
from localstore.db.backend import Connection
from localstore.db.postgres_backend import PostgresConnection
from localstore.db.sqlite_backend import SQLiteConnection
from localstore.errors import ConnectionUnavailable

logger = logging.getLogger(__name__)


async def open_connection(
    name: str, *, size: int | None = None, version: str | None = None
) -> Connection:
    """Open the connection for database ``name``.

    Dispatches to PostgreSQL when LOCALSTORE_DATABASE_URL is a postgresql URL,
    otherwise to a SQLite file ``<name>.db`` in the data directory. The name
    ":memory:" always opens an in-memory SQLite database (used by tests).
    Raises ConnectionUnavailable when the engine cannot be opened.
    """
    if name == ":memory:":
        return await SQLiteConnection.open(":memory:", size=size, version=version)
    url = get_database_url()
    if url and url.startswith("postgresql"):
        return await _open_postgres(url, version=version)
    return await SQLiteConnection.open(sqlite_path(name), size=size, version=version)


def sqlite_path(name: str) -> Path:
    """Path of the SQLite file for database ``name``."""
    return get_data_dir() / f"{name}.db"


async def _open_postgres(url: str, *, version: str | None = None) -> Connection:
    """Open a PostgreSQL connection; needs the ``postgres`` extra."""
    logger.info("Connecting to PostgreSQL")
    try:
        return await PostgresConnection.open(url, version=version)
    except ImportError as exc:
        raise ConnectionUnavailable(
            "PostgreSQL support needs asyncpg (install localstore[postgres])"
        ) from exc
