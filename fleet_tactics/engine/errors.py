"""Error types for illegal moves."""

from dataclasses import dataclass


class IllegalMoveError(ValueError):
    """Raised inside the engine for a recoverable, user-facing illegal move.

    Public ability entry points catch it and return a SkillError instead, so
    callers see a structured result and the input state stays untouched.
    """


@dataclass(frozen=True)
class SkillError:
    """Structured rejection returned by ability and action operations.

    Attributes:
        error: Message suitable for showing to the player
    """

    error: str
