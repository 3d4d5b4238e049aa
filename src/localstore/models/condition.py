"""Tri-form SQL condition fragments: raw text, explicit pair, or keyed mapping.

Public operations accept loosely typed fragments; ``as_condition`` turns them
into one of the variants below once, at the boundary. Each variant then knows
how to render itself as ``(sql_text, parameters)``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

Normalized = tuple[str | None, list[Any]]


def as_param_list(params: Any) -> list[Any]:
    """Treat a scalar as a one-element parameter list."""
    if params is None:
        return []
    if isinstance(params, (str, bytes, bytearray)) or not isinstance(params, Sequence):
        return [params]
    return list(params)


@dataclass(frozen=True)
class Raw:
    """Literal SQL fragment with no parameters. Nothing is quoted or escaped."""

    text: str

    def normalize(self, joiner: str, comparator: str = "=") -> Normalized:
        return (self.text or None, [])


@dataclass(frozen=True)
class Paired:
    """Literal SQL fragment with an explicit, ordered parameter list."""

    text: str
    params: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", as_param_list(self.params))

    def normalize(self, joiner: str, comparator: str = "=") -> Normalized:
        return (self.text or None, list(self.params))


@dataclass(frozen=True)
class Keyed:
    """Column/value equalities, rendered in the mapping's insertion order."""

    mapping: Mapping[str, Any]

    def normalize(self, joiner: str, comparator: str = "=") -> Normalized:
        clauses = []
        params = []
        for column, value in self.mapping.items():
            clauses.append(f"{column}{comparator}?")
            params.append(value)
        if not clauses:
            return (None, [])
        return (joiner.join(clauses), params)


Condition = Raw | Paired | Keyed


def as_condition(value: Any) -> Condition | None:
    """Coerce a public where/changes/values argument into a Condition.

    Accepts ``None``, a string, a mapping, a ``[text, params]`` pair, or an
    existing Condition. Raises TypeError for anything else.
    """
    if value is None or isinstance(value, (Raw, Paired, Keyed)):
        return value
    if isinstance(value, str):
        return Raw(value)
    if isinstance(value, Mapping):
        return Keyed(value)
    if isinstance(value, (list, tuple)) and len(value) == 2 and isinstance(value[0], str):
        return Paired(value[0], value[1])
    raise TypeError(
        f"Unsupported condition {value!r}: expected a string, a mapping, "
        "or a (text, params) pair"
    )
