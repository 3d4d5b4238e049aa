"""Shared enum constants."""

from enum import StrEnum


class Status(StrEnum):
    """Population state of a result view."""

    EMPTY = "empty"
    READY = "ready"


class ErrorAction(StrEnum):
    """What a per-statement error handler asks the engine to do next."""

    CONTINUE = "continue"
    ABORT = "abort"
