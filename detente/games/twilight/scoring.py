"""
Region scoring.

status() and score() are pure; score_region() applies the result to the
state, including the automatic win for controlling Europe.
"""

from __future__ import annotations
from enum import IntEnum
from typing import TYPE_CHECKING

from .countries import CName, Region, Side, adjacent_to_superpower
from .effects import Effect
from .legal import SPACE_VP

if TYPE_CHECKING:
    from ...engine_core.state import GameState


class RegionStatus(IntEnum):
    NONE = 0
    PRESENCE = 1
    DOMINATION = 2
    CONTROL = 3


# VP for presence, domination, control. Europe control wins outright.
REGION_VALUES: dict[Region, tuple[int, int, int]] = {
    Region.EUROPE: (3, 7, 0),
    Region.ASIA: (3, 7, 9),
    Region.MIDDLE_EAST: (3, 5, 7),
    Region.AFRICA: (1, 4, 6),
    Region.CENTRAL_AMERICA: (1, 3, 5),
    Region.SOUTH_AMERICA: (2, 5, 6),
}

FINAL_SCORING_ORDER = (
    Region.ASIA,
    Region.MIDDLE_EAST,
    Region.AFRICA,
    Region.CENTRAL_AMERICA,
    Region.SOUTH_AMERICA,
    # Last, so an automatic Europe win overrides the other regions
    Region.EUROPE,
)


def _is_battleground(state: GameState, country: int, side: Side) -> bool:
    if (country == CName.Taiwan and side == Side.US
            and state.has_effect(Side.US, Effect.FORMOSAN_RESOLUTION)):
        return True
    return state.countries[country].battleground


def _counts(region: Region, state: GameState, side: Side) -> tuple[int, int, int]:
    """(countries, battlegrounds, countries adjacent to the enemy superpower)."""
    total = bg = adjacent = 0
    for c in region.countries():
        if not state.is_controlled(side, c):
            continue
        total += 1
        if _is_battleground(state, c, side):
            bg += 1
        if adjacent_to_superpower(c, side.opposite()):
            adjacent += 1
    return total, bg, adjacent


def _status(mine: tuple[int, int, int], theirs: tuple[int, int, int],
            region_bgs: int) -> RegionStatus:
    total, bg, _ = mine
    if total == 0:
        return RegionStatus.NONE
    if bg >= region_bgs and total > theirs[0]:
        return RegionStatus.CONTROL
    if total > theirs[0] and bg > theirs[1] and total > bg:
        return RegionStatus.DOMINATION
    return RegionStatus.PRESENCE


def status(region: Region, state: GameState) -> tuple[tuple[RegionStatus, RegionStatus], int]:
    """Return ((US status, USSR status), US battlegrounds minus USSR battlegrounds)."""
    us = _counts(region, state, Side.US)
    ussr = _counts(region, state, Side.USSR)
    region_bgs = sum(1 for c in region.countries() if state.countries[c].battleground)
    pair = (_status(us, ussr, region_bgs), _status(ussr, us, region_bgs))
    return pair, us[1] - ussr[1]


def _side_value(region: Region, st: RegionStatus) -> int:
    if st == RegionStatus.NONE:
        return 0
    return REGION_VALUES[region][st - 1]


def score(region: Region, state: GameState) -> int:
    """VP change from scoring region, positive for the US."""
    if region == Region.SOUTHEAST_ASIA:
        return _score_southeast_asia(state)
    (us_st, ussr_st), bg_diff = status(region, state)
    us = _counts(region, state, Side.US)
    ussr = _counts(region, state, Side.USSR)
    delta = _side_value(region, us_st) - _side_value(region, ussr_st)
    return delta + bg_diff + us[2] - ussr[2]


def _score_southeast_asia(state: GameState) -> int:
    delta = 0
    for c in Region.SOUTHEAST_ASIA.countries():
        worth = 2 if c == CName.Thailand else 1
        owner = state.controller(c)
        if owner == Side.US:
            delta += worth
        elif owner == Side.USSR:
            delta -= worth
    return delta


def score_region(region: Region, state: GameState) -> int:
    """Score region into the state. Returns the VP change."""
    if region == Region.EUROPE:
        (us_st, ussr_st), _ = status(region, state)
        if us_st == RegionStatus.CONTROL:
            state.declare_winner(Side.US, "europe")
            return 0
        if ussr_st == RegionStatus.CONTROL:
            state.declare_winner(Side.USSR, "europe")
            return 0
    delta = score(region, state)
    state.add_vp(delta)
    return delta


def advance_space(state: GameState, side: Side) -> None:
    """Move side one box up the space race, scoring first or second arrival."""
    box = state.space[side]
    if box >= len(SPACE_VP):
        return
    first, second = SPACE_VP[box]
    arrived_first = state.space[side.opposite()] <= box
    state.space[side] = box + 1
    vp = first if arrived_first else second
    state.add_vp(vp if side == Side.US else -vp)
