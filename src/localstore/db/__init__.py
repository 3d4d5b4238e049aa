"""Engine connections and result sets."""

from localstore.db.backend import Connection, ResultSet, Row
from localstore.db.connection import open_connection
from localstore.db.postgres_backend import PostgresConnection
from localstore.db.sqlite_backend import SQLiteConnection

__all__ = [
    "Connection",
    "PostgresConnection",
    "ResultSet",
    "Row",
    "SQLiteConnection",
    "open_connection",
]
