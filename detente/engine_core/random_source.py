"""
Randomness Source - Die rolls, random discards and reshuffles.

One source belongs to one game. InternalRandom is seedable for reproducible
self-play; ScriptedRandom replays a recorded game and fails loudly as soon
as the engine asks for something the record does not contain.
"""

from __future__ import annotations
import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable

from ..games.twilight.cards import Card
from ..games.twilight.countries import Side
from ..games.twilight.deck import Deck
from .errors import RandomnessExhausted, ReshuffleMismatch

logger = logging.getLogger(__name__)


class RandomSource(ABC):

    @abstractmethod
    def roll(self, side: Side) -> int:
        """Roll a six-sided die for side."""
        pass

    @abstractmethod
    def random_card_from_hand(self, deck: Deck, side: Side) -> Card | None:
        """A random card from side's hand, or None if and only if the hand is empty."""
        pass

    @abstractmethod
    def reshuffle(self, deck: Deck) -> None:
        """Move the discard pile into the draw pile in a new order."""
        pass


class InternalRandom(RandomSource):
    """Pseudorandom source, reproducible when seeded."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self.rng = random.Random(seed)

    def roll(self, side: Side) -> int:
        return self.rng.randint(1, 6)

    def random_card_from_hand(self, deck: Deck, side: Side) -> Card | None:
        hand = deck.hand(side)
        if not hand:
            return None
        return self.rng.choice(hand)

    def reshuffle(self, deck: Deck) -> None:
        order = list(deck.discard_pile)
        self.rng.shuffle(order)
        deck.reset_draw_pile(order)


class ScriptedRandom(RandomSource):
    """
    Replays recorded randomness in order.

    Rolls are queued per side. Discards are the recorded results of random
    hand draws (None for an empty hand). Shuffle orders are full draw-pile
    orders, drawn from the end.
    """

    def __init__(
        self,
        us_rolls: Iterable[int] = (),
        ussr_rolls: Iterable[int] = (),
        discards: Iterable[Card | None] = (),
        shuffle_orders: Iterable[list[Card]] = (),
    ):
        self.rolls = {Side.US: deque(us_rolls), Side.USSR: deque(ussr_rolls)}
        self.discards: deque[Card | None] = deque(discards)
        self.shuffle_orders: deque[list[Card]] = deque(shuffle_orders)

    def roll(self, side: Side) -> int:
        queue = self.rolls[side]
        if not queue:
            raise RandomnessExhausted(f"No recorded rolls left for {side.name}")
        value = queue.popleft()
        if not 1 <= value <= 6:
            raise ValueError(f"Recorded roll {value} is not a die value")
        return value

    def random_card_from_hand(self, deck: Deck, side: Side) -> Card | None:
        if not self.discards:
            raise RandomnessExhausted("No recorded random discards left")
        card = self.discards.popleft()
        hand = deck.hand(side)
        if card is None:
            if hand:
                raise ReshuffleMismatch(
                    f"Recorded an empty hand but {side.name} holds {len(hand)} cards"
                )
        elif card not in hand:
            raise ReshuffleMismatch(f"Recorded discard {card.name} is not in the {side.name} hand")
        return card

    def reshuffle(self, deck: Deck) -> None:
        if not self.shuffle_orders:
            raise RandomnessExhausted("No recorded shuffle orders left")
        order = self.shuffle_orders.popleft()
        if sorted(order) != sorted(deck.discard_pile):
            raise ReshuffleMismatch("Recorded shuffle order does not match the discard pile")
        logger.debug("Applying recorded shuffle of %d cards", len(order))
        deck.reset_draw_pile(order)

    def remaining(self) -> dict[str, int]:
        """Unused recorded entries, for end-of-replay checks."""
        return {
            "us_rolls": len(self.rolls[Side.US]),
            "ussr_rolls": len(self.rolls[Side.USSR]),
            "discards": len(self.discards),
            "shuffle_orders": len(self.shuffle_orders),
        }
