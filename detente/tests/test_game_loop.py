"""
Tests for the turn driver.

Tests:
- Setup placements
- Headline ordering
- End-of-turn bookkeeping
- Whole games under a fixed seed
"""

import pytest

from ..bots.policy import FirstLegalAgent, HeuristicAgent, RandomAgent
from ..config import EngineConfig
from ..engine_core.action import ActionKind
from ..engine_core.random_source import InternalRandom
from ..engine_core.state import WIN_VP, GameState
from ..games.twilight.cards import EARLY_WAR, MID_WAR, Card
from ..games.twilight.countries import NUM_COUNTRIES, CName, Side
from ..games.twilight.effects import Effect
from ..session.game_loop import GameLoop, Win
from .conftest import deal


def first_legal_loop(state=None, turns=10, seed=0) -> GameLoop:
    agents = {Side.US: FirstLegalAgent(Side.US), Side.USSR: FirstLegalAgent(Side.USSR)}
    return GameLoop(state or GameState.new_game(), agents, InternalRandom(seed),
                    config=EngineConfig(turns=turns))


def total_influence(state: GameState, side: Side) -> int:
    return sum(state.influence(side, c) for c in range(NUM_COUNTRIES))


class TestSetup:

    def test_deal_and_place(self):
        """Setup deals hands and places thirteen influence."""
        loop = first_legal_loop()
        state = loop.state
        us_before = total_influence(state, Side.US)
        ussr_before = total_influence(state, Side.USSR)

        loop.setup()

        assert len(state.deck.us_hand) == 8
        assert len(state.deck.ussr_hand) == 8
        assert state.deck.total_cards() == len(EARLY_WAR)
        assert total_influence(state, Side.USSR) == ussr_before + 6
        assert total_influence(state, Side.US) == us_before + 7
        assert loop.is_setup

    def test_placements_are_single_choices(self):
        """Each setup placement is recorded separately."""
        loop = first_legal_loop()
        loop.setup()
        assert [c.kind for c in loop.history] == [ActionKind.PLACE] * 13


class TestHeadline:

    def test_higher_ops_first(self, state):
        """Both headlines are chosen, then resolved by ops value."""
        deal(state, Side.US, Card.Containment)
        deal(state, Side.USSR, Card.Nasser)
        loop = first_legal_loop(state)

        loop.headline()

        events = [c.choice for c in loop.history if c.kind == ActionKind.EVENT]
        # Two selections, then resolution in ops order
        assert events == [int(Card.Nasser), int(Card.Containment),
                          int(Card.Containment), int(Card.Nasser)]
        assert state.has_effect(Side.US, Effect.CONTAINMENT)
        assert state.influence(Side.USSR, CName.Egypt) == 2

    def test_ties_go_to_us(self, state):
        """The US headline resolves first on equal ops."""
        deal(state, Side.US, Card.Containment)
        deal(state, Side.USSR, Card.Comecon)
        loop = first_legal_loop(state)
        order = []
        loop.interpreter.listeners.append(
            lambda i: order.append(i.history[-1])
            if i.history[-1].kind == ActionKind.EVENT else None
        )

        loop.headline()

        resolved = [c.choice for c in order[2:]]
        assert resolved[0] == int(Card.Containment)

    def test_headlined_cards_leave_hands(self, state):
        """Headlined cards leave hands and starred ones are removed."""
        deal(state, Side.US, Card.Containment)
        deal(state, Side.USSR, Card.Nasser)
        first_legal_loop(state).headline()
        assert state.deck.us_hand == []
        assert state.deck.ussr_hand == []
        assert Card.Containment in state.deck.removed


class TestEndTurn:

    def test_mil_ops_penalty_and_defcon(self, state):
        """Short military ops cost VP and DEFCON improves."""
        state.defcon = 3
        state.mil_ops = [3, 1]
        loop = first_legal_loop(state)

        assert loop.end_turn() is None

        assert state.vp == 2
        assert state.defcon == 4
        assert state.turn == 2

    def test_effects_expire(self, state):
        """Turn effects expire and the China card turns face up."""
        state.add_effect(Side.US, Effect.CONTAINMENT)
        state.add_effect(Side.US, Effect.NATO)
        state.deck.china_up = False
        first_legal_loop(state).end_turn()
        assert state.effects[Side.US] == [Effect.NATO]
        assert state.deck.china_up

    @pytest.mark.parametrize("us,ussr,winner", [
        (True, False, Side.USSR),
        (False, True, Side.US),
        (True, True, Side.US),
    ])
    def test_held_scoring_card(self, state, us, ussr, winner):
        """Holding a scoring card at end of turn loses."""
        if us:
            deal(state, Side.US, Card.Asia_Scoring)
        if ussr:
            deal(state, Side.USSR, Card.Europe_Scoring)
        win = first_legal_loop(state).end_turn()
        assert win.side == winner
        assert win.reason == "held_scoring"
        assert abs(win.margin) == WIN_VP

    def test_mid_war_enters(self, state):
        """Mid War cards enter the deck at turn four."""
        state.turn = 3
        first_legal_loop(state).end_turn()
        assert state.turn == 4
        assert state.deck.total_cards() == len(MID_WAR)
        assert len(state.deck.us_hand) == len(MID_WAR) // 2

    def test_no_draw_after_last_turn(self, state):
        """No cards are drawn after the last turn."""
        state.deck.draw_pile = [Card.Fidel, Card.Nasser]
        first_legal_loop(state, turns=1).end_turn()
        assert state.deck.us_hand == []
        assert state.turn == 2


class TestWin:

    def test_instant_margin(self):
        """Instant wins carry a twenty point margin."""
        assert Win.instant(Side.US, "vp").margin == WIN_VP
        assert Win.instant(Side.USSR, "defcon").margin == -WIN_VP

    def test_final_scoring(self, state):
        """Final scoring decides by VP sign."""
        win = first_legal_loop(state).final_scoring()
        assert win.reason in ("final_scoring", "europe")
        if win.reason == "final_scoring":
            assert win.margin == state.vp
            assert win.side == (Side.US if state.vp >= 0 else Side.USSR)


class TestWholeGames:
    """Whole games under fixed seeds."""

    def play(self, seed, turns=3):
        agents = {Side.US: RandomAgent(Side.US, seed), Side.USSR: RandomAgent(Side.USSR, seed + 1)}
        loop = GameLoop(GameState.new_game(), agents, InternalRandom(seed),
                        config=EngineConfig(turns=turns))
        return loop, loop.play()

    def test_deterministic(self):
        """The same seed plays the same game."""
        loop_a, win_a = self.play(42)
        loop_b, win_b = self.play(42)
        assert win_a == win_b
        assert loop_a.history == loop_b.history
        assert loop_a.state.vp == loop_b.state.vp

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_random_games_finish(self, seed):
        """Random games run to a result."""
        loop, win = self.play(seed)
        assert win.side in (Side.US, Side.USSR)
        if win.reason != "final_scoring":
            assert loop.state.winner == win.side

    def test_heuristic_game(self):
        """Heuristic agents play a short game."""
        agents = {Side.US: HeuristicAgent(Side.US), Side.USSR: HeuristicAgent(Side.USSR)}
        loop = GameLoop(GameState.new_game(), agents, InternalRandom(9),
                        config=EngineConfig(turns=2))
        win = loop.play()
        assert win.side in (Side.US, Side.USSR)
        assert len(loop.history) > 13
