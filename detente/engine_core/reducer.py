"""
Reducer - Applies a resolved choice to the game state.

The reducer is the single point of state mutation during play.
All choices resolved by the interpreter go through Reducer.apply().

Design principles:
- Dispatch on the decision's concrete action kind
- Mutate the state in place
- Return follow-up decisions in the order they should resolve,
  including the next repetition of a repeated decision
- Delegate card events to the EventResolver
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable

from ..games.twilight import legal
from ..games.twilight.cards import Card
from ..games.twilight.countries import NUM_COUNTRIES, Side, neighbours, adjacent_to_superpower
from ..games.twilight.effects import Effect
from ..games.twilight.scoring import advance_space
from .action import ActionKind, Allowed, AllowedType, Decision, EventTime, get_catalog
from .encoder import DecodedChoice
from .state import GameState

if TYPE_CHECKING:
    from ..games.twilight.events import EventResolver
    from .random_source import RandomSource

logger = logging.getLogger(__name__)

TRAP_ESCAPE_ROLL = 4
MISSILE_CRISIS_REMOVAL = 2

Handler = Callable[[GameState, Decision, int], list[Decision]]


def _remaining(decision: Decision, allowed: list[int]) -> list[Decision]:
    """Next repetition of decision over allowed, if any repetitions are left."""
    if decision.quantity <= 1 or not allowed:
        return []
    nxt = decision.repeated()
    if decision.allowed.type == AllowedType.FIXED and len(allowed) == len(decision.allowed):
        return [nxt]
    nxt.allowed = Allowed.computed(allowed)
    return [nxt]


@dataclass
class Reducer:
    """
    Reducer applies resolved choices to game state.

    Stateless - all state is in GameState. Randomness comes from the
    game's RandomSource.
    """
    events: EventResolver
    rng: RandomSource
    _handlers: dict[ActionKind, Handler] = field(init=False, repr=False)

    def __post_init__(self):
        k = ActionKind
        self._handlers = {
            k.PLAY_CARD: self._play_card,
            k.STANDARD_OPS: self._standard_ops,
            k.COUP: self._coup,
            k.SPACE: self._space,
            k.REALIGNMENT: self._realignment,
            k.PLACE: self._place,
            k.REMOVE: self._remove,
            k.DISCARD: self._discard,
            k.EVENT: self._event,
            k.SPECIAL_EVENT: self._special_event,
            k.WAR: self._war,
            k.CLEAR_EVENT: self._clear_event,
            k.END_ROUND: self._end_round,
            k.MISSILE_CRISIS: self._missile_crisis,
            k.CHANGE_DEFCON: self._change_defcon,
        }

    def apply(self, state: GameState, decision: Decision, choice: DecodedChoice) -> list[Decision]:
        """
        Apply choice, made for decision, to state.

        Returns follow-up decisions in resolution order.
        """
        if choice.kind == ActionKind.PASS:
            return []
        handler = self._handlers.get(choice.kind)
        if handler is None:
            raise ValueError(f"No handler for action kind: {choice.kind}")
        return handler(state, decision, choice.choice)

    # -- Cards ---------------------------------------------------------

    def _play_card(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        number, slot = divmod(local, len(EventTime))
        card, side = Card(number), d.agent
        ops = legal.ops_value(card, side, state)
        fires = legal.can_event(card, state, side)
        state.deck.play_card(side, card)
        logger.debug("%s plays %s (%s)", side.name, card.name, EventTime(slot).name)

        if card.is_scoring:
            return [Decision.event(card, side)]
        ops_decision = Decision.conduct_ops(side, ops, card)
        if slot == EventTime.NEVER or not fires:
            return [ops_decision]
        event = Decision.event(card, side)
        if card.side != side.opposite():
            return [event]
        if slot == EventTime.BEFORE:
            return [event, ops_decision]
        return [ops_decision, event]

    def _space(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        card, side = Card(local), d.agent
        box = state.space[side]
        state.deck.play_card(side, card)
        state.space_attempts[side] += 1
        roll = self.rng.roll(side)
        if roll <= legal.SPACE_ROLL_MAX[box]:
            advance_space(state, side)
        logger.debug("%s space attempt with %s: roll %d, box %d",
                     side.name, card.name, roll, state.space[side])
        return []

    def _discard(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        card, side = Card(local), d.agent
        if d.params.get("recover"):
            state.deck.recover(side, card)
            return []
        state.deck.discard(side, card)
        if d.params.get("trap"):
            trap = Effect.QUAGMIRE if side == Side.US else Effect.BEAR_TRAP
            if self.rng.roll(side) <= TRAP_ESCAPE_ROLL:
                state.clear_effect(side, trap)
            return []
        if d.params.get("then_ops"):
            return [Decision.conduct_ops(side, legal.ops_value(card, side, state), card)]
        return []

    def _event(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        card = Card(local)
        if d.params.get("from_hand"):
            state.deck.play_card(d.agent, card)
        state.current_event = card
        follow = self.events.resolve(card, d.agent, state, self.rng)
        if card.starred:
            state.deck.remove(card)
        return follow

    def _special_event(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        card, sub = get_catalog().locate_special(local)
        return self.events.resolve_special(card, sub, d.agent, state, self.rng)

    def _war(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        card = d.card if d.card is not None else state.current_event
        self.events.resolve_war(card, d.agent, local, state, self.rng)
        return []

    # -- Operations ----------------------------------------------------

    def _standard_ops(self, state: GameState, d: Decision, country: int) -> list[Decision]:
        side = d.agent
        cost = legal.placement_cost(state, side, country)
        state.add_influence(side, country, 1)
        left = d.quantity - cost
        if left < 1:
            return []
        targets = d.params.get("targets") or legal.influence_targets(state, side)
        allowed = legal.affordable(state, side, targets, left)
        if not allowed:
            return []
        return [replace(d, quantity=left, allowed=Allowed.computed(allowed))]

    def _coup(self, state: GameState, d: Decision, country: int) -> list[Decision]:
        side, ops = d.agent, d.quantity
        opp = side.opposite()
        target = state.countries[country]
        roll = self.rng.roll(side)
        result = roll + ops - 2 * target.stability
        if state.has_effect(side, Effect.SALT):
            result -= 1
        if result > 0:
            removed = min(result, target.influence(opp))
            target.set_influence(opp, target.influence(opp) - removed)
            target.set_influence(side, target.influence(side) + result - removed)
        logger.debug("%s coups %s with %d ops: roll %d, result %d",
                     side.name, target.name.name, ops, roll, result)

        state.add_mil_ops(side, ops)
        subs = side == Side.US and state.has_effect(Side.US, Effect.NUCLEAR_SUBS)
        if target.battleground and not subs:
            return [Decision.change_defcon(side, 1)]
        return []

    def _realign_bonus(self, state: GameState, side: Side, country: int) -> int:
        opp = side.opposite()
        bonus = sum(
            1 for n in neighbours(country)
            if n < NUM_COUNTRIES and state.is_controlled(side, n)
        )
        if state.influence(side, country) > state.influence(opp, country):
            bonus += 1
        if adjacent_to_superpower(country, side):
            bonus += 1
        return bonus

    def _realignment(self, state: GameState, d: Decision, country: int) -> list[Decision]:
        side = d.agent
        opp = side.opposite()
        mine = self.rng.roll(side) + self._realign_bonus(state, side, country)
        theirs = self.rng.roll(opp) + self._realign_bonus(state, opp, country)
        if mine > theirs:
            state.remove_influence(opp, country, mine - theirs)
        elif theirs > mine:
            state.remove_influence(side, country, theirs - mine)
        return _remaining(d, legal.realign_targets(state, side))

    # -- Influence from events -----------------------------------------

    def _counted(self, d: Decision, country: int) -> dict[int, int]:
        counts = d.params.setdefault("counts", {})
        counts[country] = counts.get(country, 0) + 1
        return counts

    def _under_cap(self, d: Decision, counts: dict[int, int], country: int) -> bool:
        cap = d.params.get("max_per_country")
        return cap is None or counts.get(country, 0) < cap

    def _place(self, state: GameState, d: Decision, country: int) -> list[Decision]:
        state.add_influence(d.agent, country, 1)
        counts = self._counted(d, country)
        allowed = [c for c in d.allowed.view() if self._under_cap(d, counts, c)]
        return _remaining(d, allowed)

    def _remove(self, state: GameState, d: Decision, country: int) -> list[Decision]:
        target = d.params.get("side", d.agent.opposite())
        amount = state.influence(target, country) if d.params.get("all") else 1
        state.remove_influence(target, country, amount)
        counts = self._counted(d, country)
        allowed = [
            c for c in d.allowed.view()
            if state.countries[c].has_influence(target) and self._under_cap(d, counts, c)
        ]
        follow = _remaining(d, allowed)

        relocate = d.params.get("relocate")
        if relocate is not None:
            destinations = [
                c for c in range(NUM_COUNTRIES)
                if not state.is_controlled(Side.US, c) and relocate.get(c, 0) < 2
            ]
            if destinations:
                follow.insert(0, Decision.place(
                    d.agent, Allowed.computed(destinations),
                    max_per_country=2, counts=relocate,
                ))
        return follow

    # -- Bookkeeping ---------------------------------------------------

    def _clear_event(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        state.current_event = None
        return []

    def _end_round(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        state.current_event = None
        return []

    def _missile_crisis(self, state: GameState, d: Decision, country: int) -> list[Decision]:
        state.remove_influence(d.agent, country, MISSILE_CRISIS_REMOVAL)
        state.clear_effect(d.agent, Effect.CUBAN_MISSILE_CRISIS)
        logger.info("%s defuses the Cuban Missile Crisis", d.agent.name)
        return []

    def _change_defcon(self, state: GameState, d: Decision, local: int) -> list[Decision]:
        state.set_defcon(state.defcon - d.quantity, d.agent)
        return []
