"""
Encoder - Maps decisions to flat action indices and back.

Most kinds encode as offset(kind) + each allowed local choice. Meta kinds
(BEGIN_ROUND, CONDUCT_OPS) and card kinds enumerate their candidates from
live state instead. Encoding never mutates the state.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..games.twilight import legal
from ..games.twilight.cards import Card
from ..games.twilight.countries import NUM_COUNTRIES, CName, Side
from ..games.twilight.effects import Effect
from .action import ActionKind, Decision, get_catalog
from .errors import EmptyAllowedSet
from .state import GameState


@dataclass(frozen=True)
class DecodedChoice:
    """A semantic choice: action kind plus local choice index."""
    kind: ActionKind
    choice: int = 0

    @property
    def flat(self) -> int:
        return get_catalog().offset(self.kind) + self.choice

    @classmethod
    def pass_(cls) -> DecodedChoice:
        return cls(ActionKind.PASS, 0)


def decode(flat: int) -> DecodedChoice:
    kind, local = get_catalog().locate(flat)
    return DecodedChoice(kind, local)


def _flat(kind: ActionKind, choices) -> list[int]:
    base = get_catalog().offset(kind)
    return [base + c for c in choices]


def _pass() -> list[int]:
    return [get_catalog().offset(ActionKind.PASS)]


def under_missile_crisis(state: GameState, side: Side) -> bool:
    return side in (Side.US, Side.USSR) and state.has_effect(side, Effect.CUBAN_MISSILE_CRISIS)


def standard_ops_targets(decision: Decision, state: GameState) -> list[int]:
    """Placement targets for the remaining ops of a decision."""
    base = decision.params.get("targets")
    if base is None:
        base = legal.influence_targets(state, decision.agent)
    return legal.affordable(state, decision.agent, base, decision.quantity)


def _begin_round(decision: Decision, state: GameState) -> list[int]:
    side = decision.agent
    if legal.is_trapped(state, side):
        scoring = _flat(ActionKind.EVENT, legal.trap_scoring(state, side))
        # Discarding now would leave a scoring card in hand at end of turn
        if state.deck.must_play_scoring(side, state.ar_left(side)):
            return scoring
        out = _flat(ActionKind.DISCARD, legal.trap_discards(state, side)) + scoring
        return out or _pass()
    out = _flat(ActionKind.SPACE, legal.space_cards(state, side))
    out += _play_card(decision, state)
    return out


def _play_card(decision: Decision, state: GameState) -> list[int]:
    side = decision.agent
    out = _flat(ActionKind.PLAY_CARD, legal.play_card_choices(state, side))
    if not out or state.ar > state.ars_per_turn:
        out += _pass()
    return out


def _conduct_ops(decision: Decision, state: GameState) -> list[int]:
    side = decision.agent
    out = _flat(ActionKind.STANDARD_OPS, standard_ops_targets(decision, state))
    if not under_missile_crisis(state, side):
        out += _flat(ActionKind.COUP, legal.coup_targets(state, side))
    out += _flat(ActionKind.REALIGNMENT, legal.realign_targets(state, side))
    return out or _pass()


def _event(decision: Decision, state: GameState) -> list[int]:
    if decision.allowed.is_empty():
        return _flat(ActionKind.EVENT, legal.headline_cards(state, decision.agent))
    return _flat(ActionKind.EVENT, decision.allowed.view())


def _special_event(decision: Decision, state: GameState) -> list[int]:
    card = decision.card if decision.card is not None else state.current_event
    if card is None:
        raise EmptyAllowedSet("SPECIAL_EVENT decision without a card")
    sub = get_catalog().special_offset(card)
    return _flat(ActionKind.SPECIAL_EVENT, [sub + c for c in decision.allowed.view()])


def encode(decision: Decision, state: GameState) -> list[int]:
    """
    Encode a decision as the list of flat indices it may resolve to.

    Raises EmptyAllowedSet if a non-optional decision has no candidates.
    """
    kind = decision.action
    if kind == ActionKind.BEGIN_ROUND:
        out = _begin_round(decision, state)
    elif kind == ActionKind.PLAY_CARD:
        if decision.allowed.is_empty():
            out = _play_card(decision, state)
        else:
            out = _flat(kind, decision.allowed.view())
    elif kind == ActionKind.CONDUCT_OPS:
        out = _conduct_ops(decision, state)
    elif kind == ActionKind.COUP and under_missile_crisis(state, decision.agent):
        out = _pass()
    elif kind == ActionKind.EVENT:
        out = _event(decision, state)
    elif kind == ActionKind.SPECIAL_EVENT:
        out = _special_event(decision, state)
    elif kind == ActionKind.MISSILE_CRISIS:
        out = _pass() + _flat(kind, decision.allowed.view())
    elif kind in (ActionKind.PASS, ActionKind.CLEAR_EVENT, ActionKind.END_ROUND,
                  ActionKind.CHANGE_DEFCON):
        out = _flat(kind, [0])
    else:
        out = _flat(kind, decision.allowed.view())

    if decision.optional and kind != ActionKind.MISSILE_CRISIS:
        out = out + _pass()
    if not out:
        raise EmptyAllowedSet(
            f"{kind.name} decision for {decision.agent.name} has no candidates"
        )
    return out


def encode_single(kind: ActionKind, choice: int) -> int | None:
    """Flat index of one semantic choice, or None if it does not round-trip."""
    catalog = get_catalog()
    if choice < 0 or choice >= catalog.arity(kind):
        return None
    flat = catalog.offset(kind) + choice
    if decode(flat) != DecodedChoice(kind, choice):
        return None
    return flat


def is_trivial(candidates: list[int]) -> bool:
    return len(candidates) <= 1


def describe(choice: DecodedChoice) -> str:
    """Human-readable rendering of a choice, for logs and the API."""
    kind = choice.kind
    if kind in (ActionKind.SPACE, ActionKind.DISCARD, ActionKind.EVENT):
        return f"{kind.value} {Card(choice.choice).display_name}"
    if kind == ActionKind.PLAY_CARD:
        card, slot = divmod(choice.choice, 3)
        return f"{kind.value} {Card(card).display_name} slot {slot}"
    if kind == ActionKind.SPECIAL_EVENT:
        card, sub = get_catalog().locate_special(choice.choice)
        return f"{kind.value} {card.display_name} option {sub}"
    if kind.is_ops or kind in (ActionKind.PLACE, ActionKind.REMOVE, ActionKind.WAR,
                               ActionKind.MISSILE_CRISIS):
        if choice.choice < NUM_COUNTRIES:
            return f"{kind.value} {CName(choice.choice).name}"
    return kind.value
