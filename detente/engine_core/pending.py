"""
Pending Decisions - The decision stack and the interpreter that drains it.

The interpreter loop, per step:
1. Pop the top decision
2. Clear the current-event marker when the acting side changes
3. Offer the Cuban Missile Crisis interrupt before coups and operations
4. Encode; resolve trivially or ask the owning agent
5. Collapse meta kinds to the concrete kind the agent picked
6. Apply through the reducer and push the follow-ups

The stack is explicit and inspectable so a game can be snapshotted in the
middle of an action round.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable

from ..games.twilight import legal
from ..games.twilight.countries import Side
from .action import ActionKind, Allowed, Decision
from .encoder import DecodedChoice, decode, describe, encode, is_trivial, under_missile_crisis
from .errors import IllegalChoice
from .reducer import Reducer
from .state import GameState

if TYPE_CHECKING:
    from ..bots.policy import Agent

logger = logging.getLogger(__name__)


class PendingStack:
    """Most-recent-first stack of decisions, backed by a list."""

    def __init__(self, decisions: Iterable[Decision] = ()):
        self._items: list[Decision] = []
        self.extend(decisions)

    def push(self, decision: Decision) -> None:
        # Bookkeeping markers go beneath the decisions they close
        if decision.action == ActionKind.EVENT:
            self._items.append(Decision(agent=Side.NEUTRAL, action=ActionKind.CLEAR_EVENT))
        elif decision.action == ActionKind.BEGIN_ROUND:
            self._items.append(Decision(agent=Side.NEUTRAL, action=ActionKind.END_ROUND))
        self._items.append(decision)

    def extend(self, decisions: Iterable[Decision]) -> None:
        """Push decisions so that the first one resolves first."""
        for decision in reversed(list(decisions)):
            self.push(decision)

    def pop(self) -> Decision:
        if not self._items:
            raise IndexError("pop from empty decision stack")
        return self._items.pop()

    def peek(self) -> Decision | None:
        return self._items[-1] if self._items else None

    def snapshot(self) -> list[Decision]:
        """Pending decisions, most recent first."""
        return list(reversed(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


@dataclass
class Interpreter:
    """
    Drives pending decisions to completion.

    Agents are keyed by side. Bookkeeping decisions belong to
    Side.NEUTRAL and are always trivial, so they need no agent.
    """
    state: GameState
    agents: dict[Side, Agent]
    reducer: Reducer
    history: list[DecodedChoice] = field(default_factory=list)
    listeners: list[Callable[[Interpreter], None]] = field(default_factory=list)
    _offered: set[Side] = field(default_factory=set)
    _last_agent: Side | None = None

    def resolve(self, stack: PendingStack) -> None:
        """Resolve until the stack is empty or the game has a winner."""
        self._offered = set()
        self._last_agent = None
        while stack and self.state.winner is None:
            self.step(stack)

    def step(self, stack: PendingStack) -> None:
        decision = stack.pop()
        if self._last_agent is not None and self._last_agent != decision.agent:
            self.state.current_event = None
        self._last_agent = decision.agent

        if self._interrupt(decision, stack):
            return

        choice, decision = self.choose(decision)
        logger.debug("%s resolves %s: %s", decision.agent.name,
                     decision.action.name, describe(choice))
        follow = self.reducer.apply(self.state, decision, choice)
        stack.extend(follow)
        self.record(choice)

    def record(self, choice: DecodedChoice) -> None:
        """Append choice to the history and notify listeners."""
        self.history.append(choice)
        for listener in self.listeners:
            listener(self)

    def choose(self, decision: Decision) -> tuple[DecodedChoice, Decision]:
        """
        Pick a choice for decision without applying it.

        Returns the choice and the decision it applies to, which differs
        from the input when a meta kind collapsed to a concrete one.
        """
        candidates = encode(decision, self.state)
        agent = self.agents.get(decision.agent)
        if is_trivial(candidates):
            choice = decode(candidates[0])
            if agent is not None:
                agent.trivial_action(candidates[0])
        else:
            if agent is None:
                raise IllegalChoice(f"No agent for {decision.agent.name}")
            choice = agent.decide(self.state, candidates)
            if choice.flat not in candidates:
                raise IllegalChoice(
                    f"{decision.agent.name} chose {choice.kind.name} {choice.choice}, "
                    f"which was not offered for {decision.action.name}"
                )
        if choice.kind not in (decision.action, ActionKind.PASS):
            decision = self._collapse(decision, choice)
        return choice, decision

    def _interrupt(self, decision: Decision, stack: PendingStack) -> bool:
        """Defer decision behind a missile crisis decision if one is due."""
        if decision.action not in (ActionKind.COUP, ActionKind.CONDUCT_OPS):
            return False
        side = decision.agent
        if side in self._offered or not under_missile_crisis(self.state, side):
            return False
        targets = legal.cuban_targets(self.state, side)
        if not targets:
            return False
        stack.push(decision)
        stack.push(Decision(
            agent=side,
            action=ActionKind.MISSILE_CRISIS,
            allowed=Allowed.computed(targets),
            optional=True,
        ))
        self._offered.add(side)
        logger.debug("Offering missile crisis interrupt to %s", side.name)
        return True

    def _collapse(self, decision: Decision, choice: DecodedChoice) -> Decision:
        """Rebuild decision for the concrete kind with fresh legality."""
        state, side, kind = self.state, decision.agent, choice.kind
        params = dict(decision.params)
        k = ActionKind
        if kind == k.STANDARD_OPS:
            params["targets"] = legal.influence_targets(state, side)
            allowed = legal.affordable(state, side, params["targets"], decision.quantity)
        elif kind == k.COUP:
            allowed = legal.coup_targets(state, side)
        elif kind == k.REALIGNMENT:
            allowed = legal.realign_targets(state, side)
        elif kind == k.PLAY_CARD:
            allowed = legal.play_card_choices(state, side)
        elif kind == k.SPACE:
            allowed = legal.space_cards(state, side)
        elif kind == k.DISCARD:
            params["trap"] = True
            allowed = legal.trap_discards(state, side)
        elif kind == k.EVENT:
            params["from_hand"] = True
            allowed = legal.trap_scoring(state, side)
        else:
            raise IllegalChoice(f"{decision.action.name} cannot become {kind.name}")
        if choice.choice not in allowed:
            raise IllegalChoice(f"{kind.name} {choice.choice} is not legal for {side.name}")
        rebuilt = decision.with_kind(kind, Allowed.computed(allowed))
        rebuilt.params = params
        return rebuilt

    def legal_choices(self, decision: Decision) -> list[DecodedChoice]:
        """Decoded candidates for decision, for agents and the API."""
        return [decode(i) for i in encode(decision, self.state)]

