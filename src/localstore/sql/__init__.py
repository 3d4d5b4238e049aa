"""SQL fragment normalization and statement building."""

from localstore.sql.builder import create_table, destroy, insert, select, update
from localstore.sql.normalizer import AND, COMMA, normalize

__all__ = ["AND", "COMMA", "create_table", "destroy", "insert", "normalize", "select", "update"]
