"""
Deck - Hands, draw pile, discard pile, removed pile and the China card.

The draw pile is a stack: cards are drawn from the end of the list. The
China card never enters a pile; it is tracked by owner and face-up flag.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from .cards import Card
from .countries import Side

if TYPE_CHECKING:
    from ...engine_core.random_source import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class Deck:
    us_hand: list[Card] = field(default_factory=list)
    ussr_hand: list[Card] = field(default_factory=list)
    draw_pile: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    removed: list[Card] = field(default_factory=list)
    china: Side = Side.USSR
    china_up: bool = True

    def hand(self, side: Side) -> list[Card]:
        if side == Side.US:
            return self.us_hand
        if side == Side.USSR:
            return self.ussr_hand
        raise ValueError("NEUTRAL has no hand")

    def total_cards(self) -> int:
        """Cards across every pile and hand, excluding the China card."""
        return (
            len(self.us_hand) + len(self.ussr_hand) + len(self.draw_pile)
            + len(self.discard_pile) + len(self.removed)
        )

    def held_scoring(self, side: Side) -> bool:
        return any(c.is_scoring for c in self.hand(side))

    def must_play_scoring(self, side: Side, ar_left: int) -> bool:
        """True when the scoring cards in hand need every remaining round."""
        count = sum(1 for c in self.hand(side) if c.is_scoring)
        return count > 0 and count >= ar_left

    def china_available(self, side: Side) -> bool:
        return self.china == side and self.china_up

    def play_card(self, side: Side, card: Card) -> None:
        """Move a played card from hand to discard; the China card changes hands."""
        if card.is_china:
            if self.china != side:
                raise ValueError(f"{side.name} does not hold the China card")
            self.china = side.opposite()
            self.china_up = False
            return
        self.hand(side).remove(card)
        self.discard_pile.append(card)

    def discard(self, side: Side, card: Card) -> None:
        self.hand(side).remove(card)
        self.discard_pile.append(card)

    def remove(self, card: Card) -> bool:
        """Move the most recent copy of a card from discard to removed."""
        for i in range(len(self.discard_pile) - 1, -1, -1):
            if self.discard_pile[i] == card:
                self.removed.append(self.discard_pile.pop(i))
                return True
        return False

    def recover(self, side: Side, card: Card) -> bool:
        """Take a card from the discard pile back into a hand."""
        if card not in self.discard_pile:
            return False
        self.discard_pile.remove(card)
        self.hand(side).append(card)
        return True

    def reset_draw_pile(self, order: list[Card]) -> None:
        """Replace both piles with a new draw order. Used by reshuffles."""
        self.draw_pile = list(order)
        self.discard_pile = []

    def add_cards(self, cards: Iterable[Card], rng: RandomSource) -> None:
        """Shuffle new cards into the draw pile, leaving the discard pile alone."""
        held_discards = self.discard_pile
        self.discard_pile = self.draw_pile + list(cards)
        self.draw_pile = []
        rng.reshuffle(self)
        self.discard_pile = held_discards

    def draw_card(self, rng: RandomSource) -> Card | None:
        if not self.draw_pile:
            if not self.discard_pile:
                return None
            logger.debug("Reshuffling %d discards", len(self.discard_pile))
            rng.reshuffle(self)
        return self.draw_pile.pop()

    def draw_cards(self, target: int, rng: RandomSource) -> None:
        """Refill both hands to target, alternating starting with the USSR."""
        pick_ussr = True
        while len(self.ussr_hand) < target and len(self.us_hand) < target:
            card = self.draw_card(rng)
            if card is None:
                return
            (self.ussr_hand if pick_ussr else self.us_hand).append(card)
            pick_ussr = not pick_ussr
        for hand in (self.ussr_hand, self.us_hand):
            while len(hand) < target:
                card = self.draw_card(rng)
                if card is None:
                    return
                hand.append(card)
