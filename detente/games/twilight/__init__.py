"""
Twilight - A card-driven Cold War game for two superpowers.

Key mechanics:
- 84 countries with stability, battleground status and adjacency
- Influence decides control; control decides region scoring
- Cards are played for operations or events each action round
- Defcon falls with battleground coups; reaching 1 ends the game
- VP at +20 or -20 ends the game

The legality, scoring and event modules are imported directly by the
engine; this package exports only the static game data.
"""

from .countries import Side, CName, Region, NUM_COUNTRIES, country_def, neighbours
from .cards import Card, NUM_CARD_SLOTS, EARLY_WAR, MID_WAR
from .effects import Effect
from .deck import Deck

__all__ = [
    "Side",
    "CName",
    "Region",
    "NUM_COUNTRIES",
    "country_def",
    "neighbours",
    "Card",
    "NUM_CARD_SLOTS",
    "EARLY_WAR",
    "MID_WAR",
    "Effect",
    "Deck",
]
