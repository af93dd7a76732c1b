"""
Action System - Action kinds, the flat action space, and decisions.

Every kind of in-game choice has a fixed arity (number of local choice
slots). Kinds are laid out end to end in one flat index space:

    flat = offset(kind) + local

The offset table is built once, on first use, and never changes.

A Decision is a unit of required choice: who chooses, what kind of choice,
which local choices are allowed, and how many times the choice repeats.
"""

from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from functools import lru_cache
from typing import Any, Sequence

from ..games.twilight.cards import NUM_CARD_SLOTS, SPECIAL_CHOICES, Card
from ..games.twilight.countries import NUM_COUNTRIES, Side
from .errors import OutOfRange


class ActionKind(Enum):
    """Kinds of choice, in flat-space order."""
    # Meta kinds: never chosen directly, they collapse to a concrete kind
    BEGIN_ROUND = "begin_round"
    PLAY_CARD = "play_card"
    CONDUCT_OPS = "conduct_ops"

    # Country and card targets
    STANDARD_OPS = "standard_ops"
    COUP = "coup"
    SPACE = "space"
    REALIGNMENT = "realignment"
    PLACE = "place"
    REMOVE = "remove"
    DISCARD = "discard"
    EVENT = "event"
    SPECIAL_EVENT = "special_event"
    WAR = "war"
    PASS = "pass"

    # Bookkeeping
    CLEAR_EVENT = "clear_event"
    END_ROUND = "end_round"
    MISSILE_CRISIS = "missile_crisis"
    CHANGE_DEFCON = "change_defcon"

    @property
    def is_meta(self) -> bool:
        return self in (ActionKind.BEGIN_ROUND, ActionKind.CONDUCT_OPS)

    @property
    def is_ops(self) -> bool:
        return self in _OPS_KINDS


_OPS_KINDS = frozenset({
    ActionKind.CONDUCT_OPS,
    ActionKind.STANDARD_OPS,
    ActionKind.COUP,
    ActionKind.REALIGNMENT,
})


class EventTime(IntEnum):
    """Play-card slots for one card."""
    BEFORE = 0  # event, then ops
    AFTER = 1  # ops, then event
    NEVER = 2  # ops only


def _arity(kind: ActionKind) -> int:
    k = ActionKind
    if kind in (k.BEGIN_ROUND, k.CONDUCT_OPS):
        return 0
    if kind == k.PLAY_CARD:
        return NUM_CARD_SLOTS * len(EventTime)
    if kind in (k.STANDARD_OPS, k.COUP, k.REALIGNMENT, k.PLACE, k.REMOVE,
                k.WAR, k.MISSILE_CRISIS):
        return NUM_COUNTRIES
    if kind in (k.SPACE, k.DISCARD, k.EVENT):
        return NUM_CARD_SLOTS
    if kind == k.SPECIAL_EVENT:
        return sum(SPECIAL_CHOICES.values())
    return 1


@dataclass(frozen=True)
class ActionCatalog:
    """
    Immutable arity and offset tables for the flat action space.

    Also holds the secondary table for SPECIAL_EVENT, which packs the
    sub-choices of every branching card end to end in card order.
    """
    kinds: tuple[ActionKind, ...]
    arities: tuple[int, ...]
    offsets: tuple[int, ...]
    size: int
    special_cards: tuple[Card, ...]
    special_offsets: tuple[int, ...]

    # Lookup tables for locate(), restricted to kinds with non-zero arity
    _starts: tuple[int, ...] = field(repr=False, default=())
    _located: tuple[ActionKind, ...] = field(repr=False, default=())

    @classmethod
    def build(cls) -> ActionCatalog:
        kinds = tuple(ActionKind)
        arities = tuple(_arity(k) for k in kinds)
        offsets = build_offsets(arities)
        size = offsets[-1] + arities[-1]

        special_cards = tuple(sorted(SPECIAL_CHOICES))
        special_offsets = build_offsets(tuple(SPECIAL_CHOICES[c] for c in special_cards))

        located = [(o, k) for o, k, a in zip(offsets, kinds, arities) if a > 0]
        return cls(
            kinds=kinds,
            arities=arities,
            offsets=offsets,
            size=size,
            special_cards=special_cards,
            special_offsets=special_offsets,
            _starts=tuple(o for o, _ in located),
            _located=tuple(k for _, k in located),
        )

    def arity(self, kind: ActionKind) -> int:
        return self.arities[self.kinds.index(kind)]

    def offset(self, kind: ActionKind) -> int:
        return self.offsets[self.kinds.index(kind)]

    def locate(self, flat: int) -> tuple[ActionKind, int]:
        """Return (kind, local choice) for a flat index."""
        if flat < 0 or flat >= self.size:
            raise OutOfRange(flat, self.size)
        i = bisect_right(self._starts, flat) - 1
        return self._located[i], flat - self._starts[i]

    def special_offset(self, card: Card) -> int:
        """Sub-offset of a branching card inside the SPECIAL_EVENT block."""
        try:
            return self.special_offsets[self.special_cards.index(card)]
        except ValueError:
            raise ValueError(f"{card.name} has no branching event") from None

    def locate_special(self, local: int) -> tuple[Card, int]:
        """Return (card, sub-choice) for a SPECIAL_EVENT local choice."""
        if local < 0 or local >= self.arity(ActionKind.SPECIAL_EVENT):
            raise OutOfRange(local, self.arity(ActionKind.SPECIAL_EVENT))
        i = bisect_right(self.special_offsets, local) - 1
        return self.special_cards[i], local - self.special_offsets[i]


def build_offsets(arities: Sequence[int]) -> tuple[int, ...]:
    """offsets[0] = 0, offsets[i+1] = offsets[i] + arities[i]."""
    offsets = [0]
    for a in arities[:-1]:
        offsets.append(offsets[-1] + a)
    return tuple(offsets)


@lru_cache(maxsize=None)
def get_catalog() -> ActionCatalog:
    """The process-wide catalog, built on first use."""
    return ActionCatalog.build()


def arity(kind: ActionKind) -> int:
    return get_catalog().arity(kind)


def offset(kind: ActionKind) -> int:
    return get_catalog().offset(kind)


def total_size() -> int:
    return get_catalog().size


def locate(flat: int) -> tuple[ActionKind, int]:
    return get_catalog().locate(flat)


class AllowedType(Enum):
    FIXED = "fixed"  # constant tuple, e.g. a region's countries
    COMPUTED = "computed"  # built from live state
    EMPTY = "empty"  # the encoder enumerates candidates itself


_NO_CHOICES: tuple[int, ...] = ()


@dataclass(frozen=True)
class Allowed:
    """The local choices a decision may take."""
    type: AllowedType
    items: Sequence[int]

    @classmethod
    def fixed(cls, items: tuple[int, ...]) -> Allowed:
        return cls(AllowedType.FIXED, items)

    @classmethod
    def computed(cls, items: list[int]) -> Allowed:
        return cls(AllowedType.COMPUTED, items)

    @classmethod
    def empty(cls) -> Allowed:
        return cls(AllowedType.EMPTY, _NO_CHOICES)

    def view(self) -> Sequence[int]:
        return self.items

    def is_empty(self) -> bool:
        return len(self.items) == 0

    def __contains__(self, choice: int) -> bool:
        return choice in self.items

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class Decision:
    """
    A pending choice.

    Fields beyond the core four:
    - card: the card that created the decision, if any
    - optional: the agent may decline with PASS
    - params: kind-specific parameters, e.g. "side" for whose influence a
      REMOVE targets, "max_per_country"
    """
    agent: Side
    action: ActionKind
    allowed: Allowed = field(default_factory=Allowed.empty)
    quantity: int = 1
    card: Card | None = None
    optional: bool = False
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Decision quantity must be >= 1, got {self.quantity}")

    @classmethod
    def begin_round(cls, side: Side) -> Decision:
        return cls(agent=side, action=ActionKind.BEGIN_ROUND)

    @classmethod
    def event(cls, card: Card, side: Side | None = None) -> Decision:
        """Event decision, owned by the card's side unless the card is neutral."""
        agent = card.side if card.side != Side.NEUTRAL else side
        if agent is None:
            raise ValueError(f"Neutral card {card.name} needs an acting side")
        return cls(
            agent=agent,
            action=ActionKind.EVENT,
            allowed=Allowed.computed([int(card)]),
            card=card,
        )

    @classmethod
    def conduct_ops(cls, side: Side, ops: int, card: Card | None = None) -> Decision:
        return cls(agent=side, action=ActionKind.CONDUCT_OPS, quantity=ops, card=card)

    @classmethod
    def place(cls, side: Side, allowed: Allowed, quantity: int = 1, **params: Any) -> Decision:
        return cls(agent=side, action=ActionKind.PLACE, allowed=allowed,
                   quantity=quantity, params=params)

    @classmethod
    def remove(cls, agent: Side, target: Side, allowed: Allowed, quantity: int = 1,
               **params: Any) -> Decision:
        """agent removes target's influence."""
        return cls(agent=agent, action=ActionKind.REMOVE, allowed=allowed,
                   quantity=quantity, params={"side": target, **params})

    @classmethod
    def special(cls, card: Card, agent: Side, allowed: list[int] | None = None) -> Decision:
        choices = allowed if allowed is not None else list(range(card.max_e_choices))
        return cls(agent=agent, action=ActionKind.SPECIAL_EVENT,
                   allowed=Allowed.computed(choices), card=card)

    @classmethod
    def change_defcon(cls, responsible: Side, amount: int = 1) -> Decision:
        return cls(agent=responsible, action=ActionKind.CHANGE_DEFCON, quantity=amount)

    def with_kind(self, kind: ActionKind, allowed: Allowed) -> Decision:
        """Rebuild for a concrete kind, keeping quantity, card and params."""
        return replace(self, action=kind, allowed=allowed, optional=False)

    def repeated(self) -> Decision:
        """The same decision with one fewer repetition."""
        return replace(self, quantity=self.quantity - 1, params=dict(self.params))
