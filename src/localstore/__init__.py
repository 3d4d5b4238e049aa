"""Callback-driven convenience layer over transactional SQL engines."""

from localstore.database import Database
from localstore.db.backend import Connection, ResultSet
from localstore.errors import (
    ConnectionUnavailable,
    LocalStoreError,
    StatementError,
    TransactionError,
    ViewAlreadyPopulated,
)
from localstore.executor import TransactionExecutor
from localstore.models import (
    ErrorAction,
    Keyed,
    Paired,
    Raw,
    Statement,
    Status,
    TransactionCallbacks,
)
from localstore.results import LazyResultView

__all__ = [
    "Connection",
    "ConnectionUnavailable",
    "Database",
    "ErrorAction",
    "Keyed",
    "LazyResultView",
    "LocalStoreError",
    "Paired",
    "Raw",
    "ResultSet",
    "Statement",
    "StatementError",
    "Status",
    "TransactionCallbacks",
    "TransactionError",
    "TransactionExecutor",
    "ViewAlreadyPopulated",
]
