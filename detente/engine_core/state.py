"""
Game State - The board, tracks and deck at a point in time.

Design principles:
- Mutated in place, and only by the reducer's apply step
- Read-only for encoding and legality queries
- Cloneable for speculative evaluation and replay comparison
"""

from __future__ import annotations
import logging
from copy import deepcopy
from dataclasses import dataclass, field

from ..games.twilight.cards import Card
from ..games.twilight.countries import (
    COUNTRY_DEFS, STARTING_INFLUENCE, CName, Side,
)
from ..games.twilight.deck import Deck
from ..games.twilight.effects import Effect

logger = logging.getLogger(__name__)

WIN_VP = 20
MAX_MIL_OPS = 5
SPACE_TRACK_END = 8


@dataclass
class CountryState:
    """Influence in one country."""
    name: CName
    stability: int
    battleground: bool
    us: int = 0
    ussr: int = 0

    def influence(self, side: Side) -> int:
        return self.us if side == Side.US else self.ussr

    def set_influence(self, side: Side, amount: int) -> None:
        if side == Side.US:
            self.us = max(amount, 0)
        else:
            self.ussr = max(amount, 0)

    def has_influence(self, side: Side) -> bool:
        return self.influence(side) > 0

    def controller(self) -> Side | None:
        if self.us - self.ussr >= self.stability:
            return Side.US
        if self.ussr - self.us >= self.stability:
            return Side.USSR
        return None


def _fresh_countries() -> list[CountryState]:
    return [
        CountryState(name=d.name, stability=d.stability, battleground=d.battleground)
        for d in COUNTRY_DEFS
    ]


@dataclass
class GameState:
    """
    Complete game state.

    VP are positive in the US's favour. The phasing side is the side taking
    the current action round; `current_event` marks the card whose event is
    being resolved so branching choices can find it.
    """
    countries: list[CountryState] = field(default_factory=_fresh_countries)
    vp: int = 0
    defcon: int = 5
    turn: int = 1
    ar: int = 0
    side: Side = Side.USSR
    space: list[int] = field(default_factory=lambda: [0, 0])
    space_attempts: list[int] = field(default_factory=lambda: [0, 0])
    mil_ops: list[int] = field(default_factory=lambda: [0, 0])
    effects: list[list[Effect]] = field(default_factory=lambda: [[], []])
    deck: Deck = field(default_factory=Deck)
    current_event: Card | None = None

    # Set once an instant win or loss happens
    winner: Side | None = None
    win_reason: str | None = None

    @classmethod
    def new_game(cls) -> GameState:
        """Board with the printed starting influence."""
        state = cls()
        for side, placements in STARTING_INFLUENCE.items():
            for country, amount in placements:
                state.countries[country].set_influence(side, amount)
        return state

    # -- Influence -----------------------------------------------------

    def influence(self, side: Side, country: int) -> int:
        return self.countries[country].influence(side)

    def add_influence(self, side: Side, country: int, amount: int) -> None:
        c = self.countries[country]
        c.set_influence(side, c.influence(side) + amount)

    def remove_influence(self, side: Side, country: int, amount: int) -> None:
        c = self.countries[country]
        c.set_influence(side, c.influence(side) - amount)

    def controller(self, country: int) -> Side | None:
        return self.countries[country].controller()

    def is_controlled(self, side: Side, country: int) -> bool:
        return self.countries[country].controller() == side

    def control(self, side: Side, country: int) -> None:
        """Add just enough influence for side to control country."""
        c = self.countries[country]
        needed = c.influence(side.opposite()) + c.stability
        c.set_influence(side, max(c.influence(side), needed))

    # -- Effects -------------------------------------------------------

    def has_effect(self, side: Side, effect: Effect) -> bool:
        return effect in self.effects[side]

    def add_effect(self, side: Side, effect: Effect) -> None:
        if effect not in self.effects[side]:
            self.effects[side].append(effect)

    def clear_effect(self, side: Side, effect: Effect) -> bool:
        if effect in self.effects[side]:
            self.effects[side].remove(effect)
            return True
        return False

    def expire_effects(self) -> None:
        for side in (Side.US, Side.USSR):
            self.effects[side] = [e for e in self.effects[side] if e.permanent()]

    # -- Tracks --------------------------------------------------------

    def add_vp(self, delta: int) -> None:
        self.vp += delta
        if self.vp >= WIN_VP:
            self.declare_winner(Side.US, "vp")
        elif self.vp <= -WIN_VP:
            self.declare_winner(Side.USSR, "vp")

    def set_defcon(self, value: int, responsible: Side | None = None) -> None:
        """Clamp to 1..5. Reaching 1 loses the game for the responsible side."""
        self.defcon = min(max(value, 1), 5)
        if self.defcon == 1:
            loser = responsible if responsible in (Side.US, Side.USSR) else self.side
            self.declare_winner(loser.opposite(), "defcon")

    def add_mil_ops(self, side: Side, amount: int) -> None:
        self.mil_ops[side] = min(self.mil_ops[side] + amount, MAX_MIL_OPS)

    def declare_winner(self, side: Side, reason: str) -> None:
        if self.winner is None:
            logger.info("%s wins by %s on turn %d", side.name, reason, self.turn)
            self.winner = side
            self.win_reason = reason

    # -- Turn structure ------------------------------------------------

    @property
    def ars_per_turn(self) -> int:
        return 6 if self.turn <= 3 else 7

    def max_ar(self, side: Side) -> int:
        if self.space[side] >= SPACE_TRACK_END:
            return self.ars_per_turn + 1
        return self.ars_per_turn

    def ar_left(self, side: Side) -> int:
        """Action rounds the side still has this turn, the current one included."""
        return max(self.max_ar(side) - max(self.ar, 1) + 1, 0)

    @property
    def hand_size(self) -> int:
        return 8 if self.turn <= 3 else 9

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
