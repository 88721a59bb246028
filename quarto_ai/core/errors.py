"""
Exception hierarchy for Quarto AI.

All custom exceptions inherit from QuartoError so callers can catch every
engine failure in one place. Expected end-of-game situations (no piece left
to give, no cell left to fill) are not errors; they are represented as None
fields on a Move.
"""

__all__ = [
    "QuartoError",
    "InvalidStateError",
    "InvalidMoveError",
    "SearchError",
]


class QuartoError(Exception):
    """Base exception for all Quarto AI errors."""


class InvalidStateError(QuartoError, ValueError):
    """A game state violates the rules or the piece accounting invariants."""


class InvalidMoveError(QuartoError, ValueError):
    """A move cannot be applied to the given game state."""


class SearchError(QuartoError, RuntimeError):
    """An internal invariant of the tree search was broken."""
