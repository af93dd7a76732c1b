"""
Tests for the deck.

Tests:
- Card conservation across play, draw, discard and reshuffle
- The China card
- Hand refills
"""

import pytest

from ..engine_core.random_source import InternalRandom
from ..games.twilight.cards import EARLY_WAR, MID_WAR, Card
from ..games.twilight.countries import Side
from ..games.twilight.deck import Deck


@pytest.fixture
def dealt() -> Deck:
    deck = Deck(discard_pile=list(EARLY_WAR))
    rng = InternalRandom(11)
    rng.reshuffle(deck)
    deck.draw_cards(8, rng)
    return deck


class TestConservation:
    """Cards are never created or lost."""

    def test_deal(self, dealt):
        """Dealing gives each side eight cards and loses none."""
        assert len(dealt.us_hand) == 8
        assert len(dealt.ussr_hand) == 8
        assert dealt.total_cards() == len(EARLY_WAR)

    def test_play_and_refill(self, dealt):
        """Repeated play and refill keeps every card."""
        rng = InternalRandom(5)
        for turn in range(6):
            for side in (Side.US, Side.USSR):
                for card in list(dealt.hand(side))[:4]:
                    dealt.play_card(side, card)
            dealt.draw_cards(8, rng)
            assert dealt.total_cards() == len(EARLY_WAR)

    def test_remove_and_add(self, dealt):
        """Removed cards stay out while new cards are shuffled in."""
        card = dealt.us_hand[0]
        dealt.play_card(Side.US, card)
        assert dealt.remove(card)
        assert not dealt.remove(card)
        dealt.add_cards(MID_WAR, InternalRandom(2))
        assert dealt.total_cards() == len(EARLY_WAR) + len(MID_WAR)
        assert card in dealt.removed

    def test_add_cards_leaves_discards(self, dealt):
        """Adding cards does not reshuffle the discard pile."""
        card = dealt.ussr_hand[0]
        dealt.discard(Side.USSR, card)
        dealt.add_cards(MID_WAR, InternalRandom(2))
        assert dealt.discard_pile == [card]

    def test_play_card_not_in_hand(self):
        """Playing a card not held raises ValueError."""
        with pytest.raises(ValueError):
            Deck().play_card(Side.US, Card.NATO)


class TestChinaCard:

    def test_passes_face_down(self):
        """The China card passes face down to the opponent."""
        deck = Deck()
        assert deck.china_available(Side.USSR)
        deck.play_card(Side.USSR, Card.The_China_Card)
        assert deck.china == Side.US
        assert not deck.china_available(Side.US)
        assert deck.total_cards() == 0

    def test_not_holder(self):
        """Only the holder can play the China card."""
        with pytest.raises(ValueError):
            Deck().play_card(Side.US, Card.The_China_Card)


class TestHands:

    def test_neutral_has_no_hand(self):
        """NEUTRAL has no hand."""
        with pytest.raises(ValueError):
            Deck().hand(Side.NEUTRAL)

    def test_draw_alternates_from_ussr(self):
        """Draws alternate, USSR first."""
        deck = Deck(draw_pile=[Card.Fidel, Card.Nasser, Card.NATO])
        deck.draw_cards(1, InternalRandom(0))
        assert deck.ussr_hand == [Card.NATO]
        assert deck.us_hand == [Card.Nasser]

    def test_must_play_scoring(self):
        """Scoring cards must be played once rounds run short."""
        deck = Deck(us_hand=[Card.Asia_Scoring, Card.NATO])
        assert deck.held_scoring(Side.US)
        assert not deck.must_play_scoring(Side.US, 2)
        assert deck.must_play_scoring(Side.US, 1)
        assert not deck.must_play_scoring(Side.USSR, 1)

    def test_recover(self):
        """A discarded card can be taken back once."""
        deck = Deck(discard_pile=[Card.Fidel])
        assert deck.recover(Side.USSR, Card.Fidel)
        assert deck.ussr_hand == [Card.Fidel]
        assert not deck.recover(Side.USSR, Card.Fidel)
