"""Turn a where/changes/values fragment into ``(sql_text, parameters)``."""

from typing import Any

from localstore.models.condition import Normalized, as_condition

AND = " AND "
COMMA = ", "


def normalize(fragment: Any, joiner: str = AND, comparator: str = "=") -> Normalized:
    """Normalize a raw string, ``[text, params]`` pair, mapping, or Condition.

    Absent input (``None``) and empty mappings yield ``(None, [])`` so callers
    can drop the dependent SQL keyword entirely.
    """
    condition = as_condition(fragment)
    if condition is None:
        return (None, [])
    return condition.normalize(joiner, comparator)
