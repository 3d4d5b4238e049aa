"""Shared test fixtures."""

import pytest
import pytest_asyncio

from localstore.database import Database


class RecordingConnection:
    """Fake engine connection that records every submitted batch.

    Nothing is executed; tests drive the recorded callbacks by hand.
    """

    def __init__(self, version: str = ""):
        self.version = version
        self.batches = []
        self.closed = False

    def transaction(self, statements, callbacks):
        self.batches.append((list(statements), callbacks))

    @property
    def statements(self):
        """All recorded statements across batches, in submission order."""
        return [statement for batch, _ in self.batches for statement in batch]

    @property
    def callbacks(self):
        return [callbacks for _, callbacks in self.batches]

    async def drain(self):
        pass

    async def close(self):
        self.closed = True


@pytest.fixture
def recording():
    """Recording fake connection."""
    return RecordingConnection()


@pytest.fixture
def recording_db(recording):
    """Database wired to the recording connection."""
    return Database(recording, name="TestDatabase")


@pytest_asyncio.fixture
async def db():
    """In-memory SQLite database."""
    database = await Database.open(":memory:")
    yield database
    await database.close()


@pytest_asyncio.fixture
async def people(db):
    """In-memory database with a populated ``people`` table."""
    db.create_table("people", {"name": "text UNIQUE", "age": "integer"})
    db.insert("people", {"name": "John", "age": 30})
    db.insert("people", {"name": "Bob", "age": 41})
    await db.drain()
    return db
