"""Error taxonomy for the decision engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base exception for decision engine errors."""
    pass


class InvalidInputError(EngineError, ValueError):
    """Malformed or out-of-range input, or an empty required collection."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidStateError(EngineError, RuntimeError):
    """Unreachable internal branch, indicating a rule table inconsistency."""
    pass
