"""A built SQL statement with its positional parameters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from localstore.models.condition import as_param_list


def placeholder_positions(sql: str) -> list[int]:
    """Offsets of ``?`` placeholders outside quoted literals and comments."""
    positions: list[int] = []
    index = 0
    while index < len(sql):
        char = sql[index]
        if char in ("'", '"'):
            # doubled quotes ('') close the literal and open the next one
            end = sql.find(char, index + 1)
            closing = 1
        elif sql.startswith("--", index):
            end = sql.find("\n", index)
            closing = 1
        elif sql.startswith("/*", index):
            end = sql.find("*/", index + 2)
            closing = 2
        else:
            if char == "?":
                positions.append(index)
            index += 1
            continue
        if end == -1:
            break
        index = end + closing
    return positions


def count_placeholders(sql: str) -> int:
    """Count ``?`` placeholders outside quoted literals and comments."""
    return len(placeholder_positions(sql))


class Statement(BaseModel):
    """SQL text plus the ordered parameters bound to its ``?`` placeholders."""

    text: str
    parameters: list[Any] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_placeholders(self) -> Statement:
        expected = count_placeholders(self.text)
        if expected != len(self.parameters):
            raise ValueError(
                f"Statement has {expected} placeholder(s) but {len(self.parameters)} "
                f"parameter(s): {self.text!r}"
            )
        return self

    @classmethod
    def coerce(cls, item: Any) -> Statement:
        """Accept a Statement, a bare SQL string, or a ``[text, params]`` pair."""
        if isinstance(item, Statement):
            return item
        if isinstance(item, str):
            return cls(text=item)
        if isinstance(item, (list, tuple)) and len(item) == 2 and isinstance(item[0], str):
            return cls(text=item[0], parameters=as_param_list(item[1]))
        raise TypeError(f"Cannot build a statement from {item!r}")
