"""Data models: conditions, statements, callbacks and status constants."""

from localstore.models.callbacks import TransactionCallbacks
from localstore.models.condition import Condition, Keyed, Paired, Raw, as_condition
from localstore.models.statement import Statement
from localstore.models.status import ErrorAction, Status

__all__ = [
    "Condition",
    "ErrorAction",
    "Keyed",
    "Paired",
    "Raw",
    "Statement",
    "Status",
    "TransactionCallbacks",
    "as_condition",
]
