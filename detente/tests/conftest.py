"""
Pytest fixtures for detente tests.
"""

import pytest

from ..engine_core.action import ActionKind
from ..engine_core.encoder import DecodedChoice
from ..engine_core.pending import Interpreter, PendingStack
from ..engine_core.random_source import ScriptedRandom
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState
from ..games.twilight.cards import Card
from ..games.twilight.countries import Side
from ..games.twilight.events import EventResolver


def flat(kind: ActionKind, choice: int = 0) -> int:
    """Flat index of a semantic choice."""
    return DecodedChoice(kind, int(choice)).flat


def play_flat(card: Card, slot: int) -> int:
    return flat(ActionKind.PLAY_CARD, int(card) * 3 + slot)


@pytest.fixture
def state() -> GameState:
    """Board with the printed starting influence and empty hands."""
    return GameState.new_game()


@pytest.fixture
def resolver() -> EventResolver:
    return EventResolver()


@pytest.fixture
def make_interpreter(resolver):
    """Factory for an interpreter over a state with the given agents and rolls."""

    def _make(state, agents=None, rng=None):
        rng = rng if rng is not None else ScriptedRandom()
        return Interpreter(state, agents or {}, Reducer(resolver, rng))

    return _make


def run(interpreter: Interpreter, *decisions) -> PendingStack:
    """Resolve decisions to completion and return the (empty) stack."""
    stack = PendingStack(decisions)
    interpreter.resolve(stack)
    return stack


def deal(state: GameState, side: Side, *cards: Card) -> None:
    state.deck.hand(side).extend(cards)
