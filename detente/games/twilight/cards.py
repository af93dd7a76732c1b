"""
Cards - Card definitions for the Early War deck and a Mid War subset.

Card structure:
- Number (dense, 1-based; slot 0 is unused)
- Owning side (NEUTRAL for cards either player can event)
- Operations value
- Starred (removed from the game once evented)
- Scoring (must be played before the end of the turn)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum

from .countries import CName, Side


class Card(IntEnum):
    """Card numbers, matching the printed deck."""
    Asia_Scoring = 1
    Europe_Scoring = 2
    Middle_East_Scoring = 3
    Duck_and_Cover = 4
    Five_Year_Plan = 5
    The_China_Card = 6
    Socialist_Governments = 7
    Fidel = 8
    Vietnam_Revolts = 9
    Blockade = 10
    Korean_War = 11
    Romanian_Abdication = 12
    Arab_Israeli_War = 13
    Comecon = 14
    Nasser = 15
    Warsaw_Pact_Formed = 16
    De_Gaulle_Leads_France = 17
    Captured_Nazi_Scientist = 18
    Truman_Doctrine = 19
    Olympic_Games = 20
    NATO = 21
    Independent_Reds = 22
    Marshall_Plan = 23
    Indo_Pakistani_War = 24
    Containment = 25
    CIA_Created = 26
    US_Japan_Mutual_Defense_Pact = 27
    Suez_Crisis = 28
    East_European_Unrest = 29
    Decolonization = 30
    Red_Scare_Purge = 31
    UN_Intervention = 32
    De_Stalinization = 33
    Nuclear_Test_Ban = 34
    Formosan_Resolution = 35
    Brush_War = 36
    Central_America_Scoring = 37
    Southeast_Asia_Scoring = 38
    Arms_Race = 39
    Cuban_Missile_Crisis = 40
    Nuclear_Subs = 41
    Quagmire = 42
    SALT_Negotiations = 43
    Bear_Trap = 44
    Summit = 45

    @property
    def att(self) -> CardAttributes:
        return CARD_ATTRIBUTES[self]

    @property
    def side(self) -> Side:
        return self.att.side

    @property
    def ops(self) -> int:
        return self.att.ops

    @property
    def starred(self) -> bool:
        return self.att.starred

    @property
    def is_scoring(self) -> bool:
        return self.att.scoring

    @property
    def is_china(self) -> bool:
        return self == Card.The_China_Card

    @property
    def max_e_choices(self) -> int:
        """Number of sub-choices this card's event branches into."""
        return SPECIAL_CHOICES.get(self, 0)

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ")


@dataclass(frozen=True)
class CardAttributes:
    side: Side
    ops: int
    starred: bool = False
    scoring: bool = False
    mid_war: bool = False


def _a(side: Side, ops: int, star: bool = False, mid: bool = False) -> CardAttributes:
    return CardAttributes(side=side, ops=ops, starred=star, mid_war=mid)


def _scoring(star: bool = False, mid: bool = False) -> CardAttributes:
    return CardAttributes(side=Side.NEUTRAL, ops=0, starred=star, scoring=True, mid_war=mid)


US, USSR, N = Side.US, Side.USSR, Side.NEUTRAL

CARD_ATTRIBUTES: dict[Card, CardAttributes] = {
    Card.Asia_Scoring: _scoring(),
    Card.Europe_Scoring: _scoring(),
    Card.Middle_East_Scoring: _scoring(),
    Card.Duck_and_Cover: _a(US, 3),
    Card.Five_Year_Plan: _a(US, 3),
    Card.The_China_Card: _a(N, 4),
    Card.Socialist_Governments: _a(USSR, 3),
    Card.Fidel: _a(USSR, 2, True),
    Card.Vietnam_Revolts: _a(USSR, 2, True),
    Card.Blockade: _a(USSR, 1, True),
    Card.Korean_War: _a(USSR, 2, True),
    Card.Romanian_Abdication: _a(USSR, 1, True),
    Card.Arab_Israeli_War: _a(USSR, 2),
    Card.Comecon: _a(USSR, 3, True),
    Card.Nasser: _a(USSR, 1, True),
    Card.Warsaw_Pact_Formed: _a(USSR, 3, True),
    Card.De_Gaulle_Leads_France: _a(USSR, 3, True),
    Card.Captured_Nazi_Scientist: _a(N, 1, True),
    Card.Truman_Doctrine: _a(US, 1, True),
    Card.Olympic_Games: _a(N, 2),
    Card.NATO: _a(US, 4, True),
    Card.Independent_Reds: _a(US, 2, True),
    Card.Marshall_Plan: _a(US, 4, True),
    Card.Indo_Pakistani_War: _a(N, 2),
    Card.Containment: _a(US, 3, True),
    Card.CIA_Created: _a(US, 1, True),
    Card.US_Japan_Mutual_Defense_Pact: _a(US, 4, True),
    Card.Suez_Crisis: _a(USSR, 3, True),
    Card.East_European_Unrest: _a(US, 3),
    Card.Decolonization: _a(USSR, 2),
    Card.Red_Scare_Purge: _a(N, 4),
    Card.UN_Intervention: _a(N, 1),
    Card.De_Stalinization: _a(USSR, 3, True),
    Card.Nuclear_Test_Ban: _a(N, 4),
    Card.Formosan_Resolution: _a(US, 2, True),
    Card.Brush_War: _a(N, 3, mid=True),
    Card.Central_America_Scoring: _scoring(mid=True),
    Card.Southeast_Asia_Scoring: _scoring(star=True, mid=True),
    Card.Arms_Race: _a(N, 3, mid=True),
    Card.Cuban_Missile_Crisis: _a(USSR, 3, True, mid=True),
    Card.Nuclear_Subs: _a(US, 2, True, mid=True),
    Card.Quagmire: _a(USSR, 3, True, mid=True),
    Card.SALT_Negotiations: _a(N, 3, True, mid=True),
    Card.Bear_Trap: _a(US, 3, True, mid=True),
    Card.Summit: _a(N, 1, mid=True),
}

# Cards whose events branch into a fixed number of sub-choices
SPECIAL_CHOICES: dict[Card, int] = {
    Card.Blockade: 2,  # discard a 3+ ops card / lose West Germany
    Card.Warsaw_Pact_Formed: 2,  # remove US influence / add USSR influence
    Card.Olympic_Games: 2,  # participate / boycott
    Card.Independent_Reds: 5,  # which Eastern European country
}

# Slot 0 is unused so that a card's number is its local index
NUM_CARD_SLOTS = max(Card) + 1

EARLY_WAR: tuple[Card, ...] = tuple(
    c for c in Card if not c.att.mid_war and not c.is_china
)
MID_WAR: tuple[Card, ...] = tuple(c for c in Card if c.att.mid_war)

# Countries offered by Independent Reds, in sub-choice order
INDEPENDENT_REDS_TARGETS: tuple[int, ...] = tuple(int(c) for c in (
    CName.Yugoslavia, CName.Romania, CName.Bulgaria, CName.Hungary,
    CName.Czechoslovakia,
))
