"""
Tests for randomness sources.

Tests:
- Seeded reproducibility
- Scripted rolls, discards and shuffles
- Exhaustion and mismatch errors
"""

import pytest

from ..bots.policy import ScriptedAgent
from ..engine_core.action import ActionKind, Decision
from ..engine_core.errors import RandomnessExhausted, ReshuffleMismatch
from ..engine_core.random_source import InternalRandom, ScriptedRandom
from ..games.twilight.cards import EARLY_WAR, Card
from ..games.twilight.countries import CName, Side
from ..games.twilight.deck import Deck
from .conftest import flat, run


class TestInternalRandom:
    """Tests for InternalRandom."""

    def test_seeded_rolls_repeat(self):
        """Seeded sources roll the same sequence."""
        a, b = InternalRandom(7), InternalRandom(7)
        assert [a.roll(Side.US) for _ in range(20)] == [b.roll(Side.US) for _ in range(20)]

    def test_rolls_are_die_values(self):
        """Rolls stay between one and six."""
        rng = InternalRandom(1)
        assert all(1 <= rng.roll(Side.USSR) <= 6 for _ in range(100))

    def test_reshuffle_keeps_cards(self):
        """A reshuffle moves every discard to the draw pile."""
        deck = Deck(discard_pile=list(EARLY_WAR))
        InternalRandom(3).reshuffle(deck)
        assert deck.discard_pile == []
        assert sorted(deck.draw_pile) == sorted(EARLY_WAR)

    def test_random_card_from_empty_hand(self):
        """An empty hand yields no card."""
        assert InternalRandom(0).random_card_from_hand(Deck(), Side.US) is None


class TestScriptedRandom:
    """Tests for ScriptedRandom."""

    def test_rolls_per_side(self):
        """Rolls are queued per side."""
        rng = ScriptedRandom(us_rolls=[1, 2], ussr_rolls=[6])
        assert rng.roll(Side.USSR) == 6
        assert rng.roll(Side.US) == 1
        assert rng.remaining()["us_rolls"] == 1

    def test_exhausted(self):
        """Asking past the record raises RandomnessExhausted."""
        rng = ScriptedRandom(us_rolls=[3])
        rng.roll(Side.US)
        with pytest.raises(RandomnessExhausted):
            rng.roll(Side.US)
        with pytest.raises(RandomnessExhausted):
            rng.roll(Side.USSR)

    def test_recorded_discard(self):
        """A recorded discard is returned when held."""
        deck = Deck(ussr_hand=[Card.Comecon, Card.Fidel])
        rng = ScriptedRandom(discards=[Card.Fidel])
        assert rng.random_card_from_hand(deck, Side.USSR) == Card.Fidel

    def test_discard_not_in_hand(self):
        """A recorded discard not in hand raises ReshuffleMismatch."""
        deck = Deck(ussr_hand=[Card.Comecon])
        rng = ScriptedRandom(discards=[Card.Fidel])
        with pytest.raises(ReshuffleMismatch):
            rng.random_card_from_hand(deck, Side.USSR)

    def test_empty_discard_for_full_hand(self):
        """A recorded empty hand must be empty."""
        deck = Deck(ussr_hand=[Card.Comecon])
        with pytest.raises(ReshuffleMismatch):
            ScriptedRandom(discards=[None]).random_card_from_hand(deck, Side.USSR)

    def test_shuffle_order_must_match(self):
        """A shuffle order must be a permutation of the discards."""
        deck = Deck(discard_pile=[Card.Fidel, Card.Nasser])
        with pytest.raises(ReshuffleMismatch):
            ScriptedRandom(shuffle_orders=[[Card.Fidel]]).reshuffle(deck)

    def test_shuffle_order_applied(self):
        """A recorded shuffle order becomes the draw pile."""
        deck = Deck(discard_pile=[Card.Fidel, Card.Nasser])
        ScriptedRandom(shuffle_orders=[[Card.Nasser, Card.Fidel]]).reshuffle(deck)
        assert deck.draw_pile == [Card.Nasser, Card.Fidel]
        assert deck.draw_card(ScriptedRandom()) == Card.Fidel


class TestExhaustedDuringPlay:
    """A scripted game asking for a roll it does not have fails loudly."""

    def test_coup_without_rolls(self, state, make_interpreter):
        """A coup with no recorded roll fails before any mutation."""
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.COUP, CName.Iran)])
        interpreter = make_interpreter(state, {Side.USSR: agent}, ScriptedRandom())

        with pytest.raises(RandomnessExhausted):
            run(interpreter, Decision.conduct_ops(Side.USSR, 3))

        assert state.mil_ops[Side.USSR] == 0
