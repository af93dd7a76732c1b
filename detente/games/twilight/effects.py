"""
Effects - Ongoing card effects attached to a side.

Most effects expire at the end of the turn; permanent ones stay until a card
explicitly cancels them.
"""

from __future__ import annotations
from enum import Enum


class Effect(Enum):
    FORMOSAN_RESOLUTION = "formosan_resolution"
    RED_SCARE_PURGE = "red_scare_purge"
    CONTAINMENT = "containment"
    ALLOW_NATO = "allow_nato"
    DE_GAULLE = "de_gaulle"
    NATO = "nato"
    US_JAPAN = "us_japan"
    CUBAN_MISSILE_CRISIS = "cuban_missile_crisis"
    NUCLEAR_SUBS = "nuclear_subs"
    QUAGMIRE = "quagmire"
    SALT = "salt"
    BEAR_TRAP = "bear_trap"

    def permanent(self) -> bool:
        return self in _PERMANENT


_PERMANENT = frozenset({
    Effect.FORMOSAN_RESOLUTION,
    Effect.ALLOW_NATO,
    Effect.DE_GAULLE,
    Effect.NATO,
    Effect.US_JAPAN,
    # Traps can span multiple turns
    Effect.QUAGMIRE,
    Effect.BEAR_TRAP,
})
