"""
Engine errors.

None of these are recovered inside a game: they signal a caller bug, an
agent bug, or drift between the engine and a recorded game.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for decision engine failures."""


class OutOfRange(EngineError):
    """A flat index outside the action space."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Flat index {index} outside action space of size {size}")
        self.index = index
        self.size = size


class IllegalChoice(EngineError):
    """An agent returned a choice that was not offered."""


class EmptyAllowedSet(EngineError):
    """A non-optional decision has no candidates."""


class RandomnessExhausted(EngineError):
    """A scripted randomness source ran out of recorded entries."""


class ReshuffleMismatch(EngineError):
    """A scripted discard or shuffle order does not match the actual cards."""


class ScriptExhausted(RandomnessExhausted):
    """A scripted agent was asked for a choice after its record ended."""
