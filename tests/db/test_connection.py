"""Tests for opening engine connections."""

from unittest.mock import AsyncMock, patch

import pytest

from localstore.db.connection import open_connection, sqlite_path
from localstore.db.sqlite_backend import SQLiteConnection
from localstore.errors import ConnectionUnavailable


@pytest.mark.asyncio
async def test_memory_uses_sqlite(monkeypatch):
    monkeypatch.setenv("LOCALSTORE_DATABASE_URL", "postgresql://localhost/ignored")
    conn = await open_connection(":memory:")
    try:
        assert isinstance(conn, SQLiteConnection)
    finally:
        await conn.close()


@pytest.mark.asyncio
async def test_named_database_file_in_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALSTORE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("LOCALSTORE_DATABASE_URL", raising=False)
    conn = await open_connection("TestDatabase")
    try:
        assert isinstance(conn, SQLiteConnection)
        assert (tmp_path / "data" / "TestDatabase.db").exists()
    finally:
        await conn.close()


def test_sqlite_path(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALSTORE_DATA_DIR", str(tmp_path))
    assert sqlite_path("people") == tmp_path / "people.db"


@pytest.mark.asyncio
async def test_unopenable_path_is_unavailable(monkeypatch, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.setenv("LOCALSTORE_DATA_DIR", str(blocker / "nested"))
    monkeypatch.delenv("LOCALSTORE_DATABASE_URL", raising=False)
    with pytest.raises(ConnectionUnavailable):
        await open_connection("TestDatabase")


@pytest.mark.asyncio
async def test_postgres_url_dispatches_to_postgres(monkeypatch):
    monkeypatch.setenv("LOCALSTORE_DATABASE_URL", "postgresql://user@localhost/store")
    sentinel = object()
    with patch(
        "localstore.db.connection.PostgresConnection.open", new=AsyncMock(return_value=sentinel)
    ) as opener:
        conn = await open_connection("TestDatabase", version="2")
    assert conn is sentinel
    opener.assert_awaited_once_with("postgresql://user@localhost/store", version="2")


@pytest.mark.asyncio
async def test_missing_asyncpg_is_unavailable(monkeypatch):
    monkeypatch.setenv("LOCALSTORE_DATABASE_URL", "postgresql://user@localhost/store")
    with patch(
        "localstore.db.connection.PostgresConnection.open",
        new=AsyncMock(side_effect=ImportError("No module named 'asyncpg'")),
    ):
        with pytest.raises(ConnectionUnavailable, match="asyncpg"):
            await open_connection("TestDatabase")
