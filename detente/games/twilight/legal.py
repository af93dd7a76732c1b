"""
Legality - Which countries and cards a side may currently choose.

All functions are read-only queries against a GameState and return plain
lists of local choice indices (country indices or card numbers).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .cards import Card
from .countries import (
    CName, NUM_COUNTRIES, Region, Side, adjacency, adjacent_to_superpower,
    neighbours, regions_of,
)
from .effects import Effect

if TYPE_CHECKING:
    from ...engine_core.state import GameState

# Ops needed to attempt each space box, and the highest roll that succeeds
SPACE_OPS_REQUIRED = (2, 2, 2, 2, 3, 3, 3, 4)
SPACE_ROLL_MAX = (3, 4, 3, 4, 3, 4, 3, 2)
# VP for reaching each box (first, second)
SPACE_VP = ((2, 1), (0, 0), (2, 0), (0, 0), (3, 1), (0, 0), (4, 2), (2, 0))

SPACE_ATTEMPTS_PER_TURN = 1


def placement_cost(state: GameState, side: Side, country: int) -> int:
    """Influence costs double in opponent-controlled countries."""
    return 2 if state.is_controlled(side.opposite(), country) else 1


def influence_targets(state: GameState, side: Side) -> list[int]:
    """Countries with own influence, adjacent to them, or adjacent to home."""
    adj = adjacency()
    targets = set()
    for c in range(NUM_COUNTRIES):
        if state.countries[c].has_influence(side):
            targets.add(c)
            targets.update(n for n in adj[c] if n < NUM_COUNTRIES)
        elif adjacent_to_superpower(c, side):
            targets.add(c)
    return sorted(targets)


def affordable(state: GameState, side: Side, targets, ops: int) -> list[int]:
    return [c for c in targets if placement_cost(state, side, c) <= ops]


def _defcon_blocked(state: GameState, country: int) -> bool:
    regions = regions_of(country)
    if state.defcon <= 4 and Region.EUROPE in regions:
        return True
    if state.defcon <= 3 and Region.ASIA in regions:
        return True
    if state.defcon <= 2 and Region.MIDDLE_EAST in regions:
        return True
    return False


def _protected(state: GameState, side: Side, country: int) -> bool:
    """Countries the side may not coup or realign for reasons of ongoing effects."""
    if side != Side.USSR:
        return False
    if country == CName.Japan and state.has_effect(Side.US, Effect.US_JAPAN):
        return True
    if (state.has_effect(Side.US, Effect.NATO)
            and Region.EUROPE in regions_of(country)
            and state.is_controlled(Side.US, country)):
        if country == CName.France and state.has_effect(Side.USSR, Effect.DE_GAULLE):
            return False
        return True
    return False


def coup_targets(state: GameState, side: Side) -> list[int]:
    opp = side.opposite()
    return [
        c for c in range(NUM_COUNTRIES)
        if state.countries[c].has_influence(opp)
        and not _defcon_blocked(state, c)
        and not _protected(state, side, c)
    ]


def realign_targets(state: GameState, side: Side) -> list[int]:
    # Same geographic restrictions as coups
    return coup_targets(state, side)


def cuban_targets(state: GameState, side: Side) -> list[int]:
    """Countries where removing 2 influence cancels the Cuban Missile Crisis."""
    if side == Side.US:
        candidates = (CName.WGermany, CName.Turkey)
    else:
        candidates = (CName.Cuba,)
    return [int(c) for c in candidates if state.influence(side, c) >= 2]


def war_targets(card: Card, state: GameState, side: Side) -> list[int]:
    if card == Card.Korean_War:
        return [int(CName.SKorea)]
    if card == Card.Arab_Israeli_War:
        return [int(CName.Israel)]
    if card == Card.Indo_Pakistani_War:
        return [int(CName.India), int(CName.Pakistan)]
    if card == Card.Brush_War:
        opp = side.opposite()
        return [
            c for c in range(NUM_COUNTRIES)
            if state.countries[c].stability <= 2
            and state.countries[c].has_influence(opp)
            and not _protected(state, side, c)
        ]
    return []


def war_modifier(state: GameState, country: int, defender: Side) -> int:
    """One point against the attacker per adjacent defender-controlled country."""
    return sum(
        1 for n in neighbours(country)
        if n < NUM_COUNTRIES and state.is_controlled(defender, n)
    )


def ops_value(card: Card, side: Side, state: GameState) -> int:
    """Card operations after ongoing modifiers, clamped to 1..4."""
    if card.is_scoring:
        return 0
    ops = card.ops
    if side == Side.US and state.has_effect(Side.US, Effect.CONTAINMENT):
        ops += 1
    if state.has_effect(side, Effect.RED_SCARE_PURGE):
        ops -= 1
    return min(max(ops, 1), 4)


def cards_at_least(state: GameState, side: Side, ops: int) -> list[int]:
    hand = state.deck.hand(side)
    return sorted({int(c) for c in hand if ops_value(c, side, state) >= ops})


def can_event(card: Card, state: GameState, side: Side | None = None) -> bool:
    """Whether the card's event would currently fire."""
    if card.is_china:
        return False
    if card == Card.NATO:
        return state.has_effect(Side.US, Effect.ALLOW_NATO)
    if card == Card.UN_Intervention:
        if side is None:
            return False
        opp = side.opposite()
        return any(c.side == opp for c in state.deck.hand(side))
    return True


def can_headline(card: Card, state: GameState) -> bool:
    return not card.is_china


def headline_cards(state: GameState, side: Side) -> list[int]:
    return sorted({int(c) for c in state.deck.hand(side) if can_headline(c, state)})


def space_cards(state: GameState, side: Side) -> list[int]:
    """Cards in hand that may be used for the next space race attempt."""
    box = state.space[side]
    if box >= len(SPACE_OPS_REQUIRED):
        return []
    if state.space_attempts[side] >= SPACE_ATTEMPTS_PER_TURN:
        return []
    needed = SPACE_OPS_REQUIRED[box]
    return sorted({
        int(c) for c in state.deck.hand(side)
        if not c.is_scoring and ops_value(c, side, state) >= needed
    })


def play_card_choices(state: GameState, side: Side) -> list[int]:
    """
    Legal PLAY_CARD local choices: card * 3 + slot.

    Own and neutral cards: event (slot 0) if it can fire, ops (slot 2)
    unless scoring. Opponent cards: event before or after ops if the event
    can fire, otherwise ops only. The China card: ops only while face up.
    """
    # Imported here: engine_core.action depends on this package's card data
    from ...engine_core.action import EventTime

    opp = side.opposite()
    choices = []
    for card in sorted(set(state.deck.hand(side))):
        base = int(card) * len(EventTime)
        fires = can_event(card, state, side)
        if card.is_scoring:
            choices.append(base + EventTime.BEFORE)
        elif card.side == opp:
            if fires:
                choices.append(base + EventTime.BEFORE)
                choices.append(base + EventTime.AFTER)
            else:
                choices.append(base + EventTime.NEVER)
        else:
            if fires:
                choices.append(base + EventTime.BEFORE)
            choices.append(base + EventTime.NEVER)
    if state.deck.china_available(side):
        choices.append(int(Card.The_China_Card) * len(EventTime) + EventTime.NEVER)
    return sorted(choices)


def is_trapped(state: GameState, side: Side) -> bool:
    trap = Effect.QUAGMIRE if side == Side.US else Effect.BEAR_TRAP
    return state.has_effect(side, trap)


def trap_discards(state: GameState, side: Side) -> list[int]:
    """Cards that may be discarded for a chance to escape a trap."""
    return sorted({
        int(c) for c in state.deck.hand(side)
        if not c.is_scoring and ops_value(c, side, state) >= 2
    })


def trap_scoring(state: GameState, side: Side) -> list[int]:
    """Scoring cards a trapped side may play, when it has to."""
    scoring = sorted({int(c) for c in state.deck.hand(side) if c.is_scoring})
    if not scoring:
        return []
    if state.deck.must_play_scoring(side, state.ar_left(side)) or not trap_discards(state, side):
        return scoring
    return []
