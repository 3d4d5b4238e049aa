"""Pure functions composing full statements from a table and fragments.

Output is deterministic for a given input order, so statement text can be
compared verbatim in tests.
"""

from collections.abc import Mapping
from typing import Any

from localstore.models.condition import Keyed, Paired, Raw
from localstore.models.statement import Statement
from localstore.sql.normalizer import AND, COMMA, normalize


def _where(where: Any) -> tuple[str, list[Any]]:
    clause, params = normalize(where, AND)
    return (f" WHERE {clause}" if clause else "", params)


def create_table(table: str, fields: Mapping[str, str] | list[tuple[str, str]]) -> Statement:
    """``CREATE TABLE t(name def, ...);`` with fields in their given order."""
    items = fields.items() if isinstance(fields, Mapping) else fields
    columns = [f"{name} {definition}" for name, definition in items]
    if not columns:
        raise ValueError(f"Table {table!r} needs at least one field")
    return Statement(text=f"CREATE TABLE {table}({', '.join(columns)});")


def select(table: str, where: Any = None) -> Statement:
    """``SELECT * FROM t[ WHERE ...];``"""
    where_sql, params = _where(where)
    return Statement(text=f"SELECT * FROM {table}{where_sql};", parameters=params)


def insert(table: str, values: Any) -> Statement:
    """Insert one row.

    A mapping names its columns; a bare list or tuple binds positionally
    against the table's column order; a Raw or Paired condition supplies the
    clause after the table name verbatim.
    """
    if isinstance(values, (Raw, Paired)) or isinstance(values, str):
        clause, params = normalize(values)
        if not clause:
            raise ValueError(f"Insert into {table!r} has an empty values clause")
        return Statement(text=f"INSERT INTO {table} {clause};", parameters=params)

    columns_sql = ""
    if isinstance(values, (Mapping, Keyed)):
        mapping = values.mapping if isinstance(values, Keyed) else values
        params = list(mapping.values())
        if mapping:
            columns_sql = f"({','.join(mapping)})"
    elif isinstance(values, (list, tuple)):
        params = list(values)
    else:
        raise TypeError(f"Unsupported insert values {values!r}")

    if not params:
        return Statement(text=f"INSERT INTO {table} DEFAULT VALUES;")
    placeholders = ", ".join("?" for _ in params)
    return Statement(
        text=f"INSERT INTO {table}{columns_sql} VALUES({placeholders});", parameters=params
    )


def update(table: str, changes: Any, where: Any = None) -> Statement:
    """``UPDATE t SET ...[ WHERE ...];`` binding SET params before WHERE params."""
    set_sql, params = normalize(changes, COMMA)
    if not set_sql:
        raise ValueError(f"Update of {table!r} has no changes")
    where_sql, where_params = _where(where)
    return Statement(
        text=f"UPDATE {table} SET {set_sql}{where_sql};", parameters=params + where_params
    )


def destroy(table: str, where: Any = None) -> Statement:
    """``DELETE FROM t[ WHERE ...];``"""
    where_sql, params = _where(where)
    return Statement(text=f"DELETE FROM {table}{where_sql};", parameters=params)
