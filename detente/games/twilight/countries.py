"""
Countries - The map: sides, countries, regions and adjacency.

Country indices are stable and dense. The 84 playable countries come first,
followed by the two superpower nodes which only exist for adjacency.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from functools import lru_cache


class Side(IntEnum):
    """A superpower, or NEUTRAL for unowned cards and bookkeeping."""
    US = 0
    USSR = 1
    NEUTRAL = 2

    def opposite(self) -> Side:
        if self == Side.US:
            return Side.USSR
        if self == Side.USSR:
            return Side.US
        raise ValueError("NEUTRAL has no opposite side")


class CName(IntEnum):
    """Country names, in map index order."""
    Canada = 0
    UK = 1
    France = 2
    SpainPortugal = 3
    Benelux = 4
    Norway = 5
    Denmark = 6
    Sweden = 7
    WGermany = 8
    EGermany = 9
    Italy = 10
    Austria = 11
    Poland = 12
    Czechoslovakia = 13
    Hungary = 14
    Yugoslavia = 15
    Greece = 16
    Romania = 17
    Bulgaria = 18
    Turkey = 19
    Finland = 20
    Lebanon = 21
    Syria = 22
    Israel = 23
    Iraq = 24
    Iran = 25
    Libya = 26
    Egypt = 27
    Jordan = 28
    GulfStates = 29
    SaudiArabia = 30
    Afghanistan = 31
    Pakistan = 32
    India = 33
    Burma = 34
    LaosCambodia = 35
    Thailand = 36
    Vietnam = 37
    Malaysia = 38
    Indonesia = 39
    Philippines = 40
    Australia = 41
    Taiwan = 42
    Japan = 43
    SKorea = 44
    NKorea = 45
    Morocco = 46
    Algeria = 47
    Tunisia = 48
    WestAfricanStates = 49
    SaharanStates = 50
    Sudan = 51
    IvoryCoast = 52
    Nigeria = 53
    Ethiopia = 54
    Somalia = 55
    Cameroon = 56
    Zaire = 57
    Kenya = 58
    Angola = 59
    SEAfricanStates = 60
    Zimbabwe = 61
    Botswana = 62
    SouthAfrica = 63
    Mexico = 64
    Guatemala = 65
    ElSalvador = 66
    Honduras = 67
    CostaRica = 68
    Panama = 69
    Nicaragua = 70
    Cuba = 71
    Haiti = 72
    DominicanRep = 73
    Venezuela = 74
    Colombia = 75
    Ecuador = 76
    Peru = 77
    Brazil = 78
    Bolivia = 79
    Chile = 80
    Paraguay = 81
    Argentina = 82
    Uruguay = 83
    US = 84
    USSR = 85


# Superpowers are map nodes, not playable countries
NUM_COUNTRIES = len(CName) - 2


@dataclass(frozen=True)
class CountryDef:
    """Static attributes of a country."""
    name: CName
    stability: int
    battleground: bool = False


def _c(name: CName, stability: int, bg: bool = False) -> CountryDef:
    return CountryDef(name=name, stability=stability, battleground=bg)


C = CName

COUNTRY_DEFS: tuple[CountryDef, ...] = (
    # Europe
    _c(C.Canada, 4), _c(C.UK, 5), _c(C.France, 3, True), _c(C.SpainPortugal, 2),
    _c(C.Benelux, 3), _c(C.Norway, 4), _c(C.Denmark, 3), _c(C.Sweden, 4),
    _c(C.WGermany, 4, True), _c(C.EGermany, 3, True), _c(C.Italy, 2, True),
    _c(C.Austria, 4), _c(C.Poland, 3, True), _c(C.Czechoslovakia, 3),
    _c(C.Hungary, 3), _c(C.Yugoslavia, 3), _c(C.Greece, 2), _c(C.Romania, 3),
    _c(C.Bulgaria, 3), _c(C.Turkey, 2), _c(C.Finland, 4),
    # Middle East
    _c(C.Lebanon, 1), _c(C.Syria, 2), _c(C.Israel, 4, True), _c(C.Iraq, 3, True),
    _c(C.Iran, 2, True), _c(C.Libya, 2, True), _c(C.Egypt, 2, True),
    _c(C.Jordan, 2), _c(C.GulfStates, 3), _c(C.SaudiArabia, 3, True),
    # Asia
    _c(C.Afghanistan, 2), _c(C.Pakistan, 2, True), _c(C.India, 3, True),
    _c(C.Burma, 2), _c(C.LaosCambodia, 1), _c(C.Thailand, 2, True),
    _c(C.Vietnam, 1), _c(C.Malaysia, 2), _c(C.Indonesia, 1),
    _c(C.Philippines, 2), _c(C.Australia, 4), _c(C.Taiwan, 3),
    _c(C.Japan, 4, True), _c(C.SKorea, 3, True), _c(C.NKorea, 3, True),
    # Africa
    _c(C.Morocco, 3), _c(C.Algeria, 2, True), _c(C.Tunisia, 2),
    _c(C.WestAfricanStates, 2), _c(C.SaharanStates, 1), _c(C.Sudan, 1),
    _c(C.IvoryCoast, 2), _c(C.Nigeria, 1, True), _c(C.Ethiopia, 1),
    _c(C.Somalia, 2), _c(C.Cameroon, 1), _c(C.Zaire, 1, True), _c(C.Kenya, 2),
    _c(C.Angola, 1, True), _c(C.SEAfricanStates, 1), _c(C.Zimbabwe, 1),
    _c(C.Botswana, 2), _c(C.SouthAfrica, 3, True),
    # Central America
    _c(C.Mexico, 2, True), _c(C.Guatemala, 1), _c(C.ElSalvador, 1),
    _c(C.Honduras, 2), _c(C.CostaRica, 3), _c(C.Panama, 2, True),
    _c(C.Nicaragua, 1), _c(C.Cuba, 3, True), _c(C.Haiti, 1),
    _c(C.DominicanRep, 1),
    # South America
    _c(C.Venezuela, 2, True), _c(C.Colombia, 1), _c(C.Ecuador, 2), _c(C.Peru, 2),
    _c(C.Brazil, 2, True), _c(C.Bolivia, 2), _c(C.Chile, 3, True),
    _c(C.Paraguay, 2), _c(C.Argentina, 2, True), _c(C.Uruguay, 2),
)


class Region(Enum):
    """Scoring and legality regions. Sub-regions overlap their parents."""
    EUROPE = "europe"
    WESTERN_EUROPE = "western_europe"
    EASTERN_EUROPE = "eastern_europe"
    MIDDLE_EAST = "middle_east"
    ASIA = "asia"
    SOUTHEAST_ASIA = "southeast_asia"
    AFRICA = "africa"
    CENTRAL_AMERICA = "central_america"
    SOUTH_AMERICA = "south_america"

    def countries(self) -> tuple[int, ...]:
        return REGION_COUNTRIES[self]


WESTERN_EUROPE: tuple[int, ...] = tuple(int(c) for c in (
    C.Canada, C.UK, C.SpainPortugal, C.France, C.Benelux, C.WGermany, C.Italy,
    C.Austria, C.Greece, C.Turkey, C.Norway, C.Denmark, C.Sweden, C.Finland,
))

EASTERN_EUROPE: tuple[int, ...] = tuple(int(c) for c in (
    C.Finland, C.EGermany, C.Poland, C.Czechoslovakia, C.Austria, C.Hungary,
    C.Romania, C.Yugoslavia, C.Bulgaria,
))

REGION_COUNTRIES: dict[Region, tuple[int, ...]] = {
    Region.EUROPE: tuple(range(C.Canada, C.Finland + 1)),
    Region.WESTERN_EUROPE: WESTERN_EUROPE,
    Region.EASTERN_EUROPE: EASTERN_EUROPE,
    Region.MIDDLE_EAST: tuple(range(C.Lebanon, C.SaudiArabia + 1)),
    Region.ASIA: tuple(range(C.Afghanistan, C.NKorea + 1)),
    Region.SOUTHEAST_ASIA: tuple(range(C.Burma, C.Philippines + 1)),
    Region.AFRICA: tuple(range(C.Morocco, C.SouthAfrica + 1)),
    Region.CENTRAL_AMERICA: tuple(range(C.Mexico, C.DominicanRep + 1)),
    Region.SOUTH_AMERICA: tuple(range(C.Venezuela, C.Uruguay + 1)),
}

_EDGES: tuple[tuple[CName, CName], ...] = (
    (C.US, C.Canada), (C.Canada, C.UK), (C.UK, C.France), (C.UK, C.Norway),
    (C.UK, C.Benelux), (C.Norway, C.Sweden), (C.Sweden, C.Denmark),
    (C.Sweden, C.Finland), (C.Finland, C.USSR), (C.France, C.WGermany),
    (C.France, C.Italy), (C.France, C.SpainPortugal), (C.France, C.Algeria),
    (C.WGermany, C.Benelux), (C.WGermany, C.Denmark), (C.WGermany, C.Austria),
    (C.WGermany, C.EGermany), (C.EGermany, C.Poland),
    (C.EGermany, C.Czechoslovakia), (C.EGermany, C.Austria),
    (C.Poland, C.USSR), (C.Poland, C.Czechoslovakia),
    (C.Czechoslovakia, C.Hungary), (C.Austria, C.Italy), (C.Austria, C.Hungary),
    (C.Hungary, C.Yugoslavia), (C.Hungary, C.Romania), (C.Romania, C.USSR),
    (C.Romania, C.Turkey), (C.Romania, C.Yugoslavia), (C.Yugoslavia, C.Italy),
    (C.Yugoslavia, C.Greece), (C.Greece, C.Italy), (C.Greece, C.Bulgaria),
    (C.Greece, C.Turkey), (C.Bulgaria, C.Turkey), (C.Turkey, C.Syria),
    (C.Syria, C.Lebanon), (C.Syria, C.Israel), (C.Lebanon, C.Israel),
    (C.Lebanon, C.Jordan), (C.Israel, C.Egypt), (C.Israel, C.Jordan),
    (C.Egypt, C.Libya), (C.Egypt, C.Sudan), (C.Libya, C.Tunisia),
    (C.Jordan, C.Iraq), (C.Jordan, C.SaudiArabia), (C.Iraq, C.SaudiArabia),
    (C.Iraq, C.GulfStates), (C.Iraq, C.Iran), (C.SaudiArabia, C.GulfStates),
    (C.Iran, C.Afghanistan), (C.Iran, C.Pakistan), (C.Afghanistan, C.USSR),
    (C.Afghanistan, C.Pakistan), (C.Pakistan, C.India), (C.India, C.Burma),
    (C.Burma, C.LaosCambodia), (C.LaosCambodia, C.Thailand),
    (C.LaosCambodia, C.Vietnam), (C.Thailand, C.Vietnam),
    (C.Thailand, C.Malaysia), (C.Malaysia, C.Australia),
    (C.Malaysia, C.Indonesia), (C.Indonesia, C.Philippines),
    (C.Philippines, C.Japan), (C.Japan, C.US), (C.Japan, C.Taiwan),
    (C.Japan, C.SKorea), (C.Taiwan, C.SKorea), (C.SKorea, C.NKorea),
    (C.NKorea, C.USSR), (C.SpainPortugal, C.Morocco),
    (C.SpainPortugal, C.Italy), (C.Morocco, C.Algeria), (C.Algeria, C.Tunisia),
    (C.Algeria, C.SaharanStates), (C.Morocco, C.WestAfricanStates),
    (C.WestAfricanStates, C.IvoryCoast), (C.IvoryCoast, C.Nigeria),
    (C.SaharanStates, C.Nigeria), (C.Nigeria, C.Cameroon),
    (C.Cameroon, C.Zaire), (C.Zaire, C.Angola), (C.Zaire, C.Zimbabwe),
    (C.Angola, C.Botswana), (C.Angola, C.SouthAfrica),
    (C.SouthAfrica, C.Botswana), (C.Botswana, C.Zimbabwe),
    (C.Zimbabwe, C.SEAfricanStates), (C.SEAfricanStates, C.Kenya),
    (C.Kenya, C.Somalia), (C.Somalia, C.Ethiopia), (C.Sudan, C.Ethiopia),
    (C.US, C.Mexico), (C.US, C.Cuba), (C.Mexico, C.Guatemala),
    (C.Guatemala, C.ElSalvador), (C.ElSalvador, C.Honduras),
    (C.Guatemala, C.Honduras), (C.Honduras, C.CostaRica),
    (C.Honduras, C.Nicaragua), (C.Nicaragua, C.Cuba), (C.Cuba, C.Haiti),
    (C.Haiti, C.DominicanRep), (C.CostaRica, C.Panama),
    (C.Panama, C.Colombia), (C.Colombia, C.Venezuela), (C.Colombia, C.Ecuador),
    (C.Venezuela, C.Brazil), (C.Brazil, C.Uruguay), (C.Uruguay, C.Paraguay),
    (C.Uruguay, C.Argentina), (C.Paraguay, C.Argentina),
    (C.Paraguay, C.Bolivia), (C.Bolivia, C.Peru), (C.Argentina, C.Chile),
    (C.Chile, C.Peru), (C.Peru, C.Ecuador),
)


@lru_cache(maxsize=None)
def adjacency() -> tuple[frozenset[int], ...]:
    """Neighbour sets for every map node, superpowers included."""
    neighbours: list[set[int]] = [set() for _ in CName]
    for a, b in _EDGES:
        neighbours[a].add(int(b))
        neighbours[b].add(int(a))
    return tuple(frozenset(n) for n in neighbours)


def neighbours(country: int) -> frozenset[int]:
    return adjacency()[country]


def superpower_node(side: Side) -> int:
    return int(C.US) if side == Side.US else int(C.USSR)


def adjacent_to_superpower(country: int, side: Side) -> bool:
    return superpower_node(side) in adjacency()[country]


def country_def(country: int) -> CountryDef:
    return COUNTRY_DEFS[country]


def regions_of(country: int) -> list[Region]:
    return [r for r, members in REGION_COUNTRIES.items() if country in members]


# Initial influence before the setup placement decisions
STARTING_INFLUENCE: dict[Side, tuple[tuple[CName, int], ...]] = {
    Side.US: (
        (C.Canada, 2), (C.UK, 5), (C.Israel, 1), (C.Iran, 1),
        (C.Philippines, 1), (C.Japan, 1), (C.Australia, 4), (C.SKorea, 1),
        (C.Panama, 1), (C.SouthAfrica, 1),
    ),
    Side.USSR: (
        (C.Syria, 1), (C.Iraq, 1), (C.NKorea, 3), (C.EGermany, 3),
        (C.Finland, 1),
    ),
}
