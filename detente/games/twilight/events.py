"""
Event Resolver - Card events as state mutations plus follow-up decisions.

resolve() applies whatever part of an event needs no choice and returns the
decisions still required, in the order they should resolve. Branching
events return a SPECIAL_EVENT decision whose answer comes back through
resolve_special(). Wars come back through resolve_war() once the target is
chosen.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from ...engine_core.action import ActionKind, Allowed, Decision
from . import legal
from .cards import INDEPENDENT_REDS_TARGETS, Card
from .countries import (
    EASTERN_EUROPE, NUM_COUNTRIES, WESTERN_EUROPE, CName, Region, Side,
)
from .effects import Effect
from .scoring import RegionStatus, advance_space, score_region, status

if TYPE_CHECKING:
    from ...engine_core.random_source import RandomSource
    from ...engine_core.state import GameState

logger = logging.getLogger(__name__)

Handler = Callable[["GameState", Side, "RandomSource"], list[Decision]]

SCORING_REGIONS: dict[Card, Region] = {
    Card.Asia_Scoring: Region.ASIA,
    Card.Europe_Scoring: Region.EUROPE,
    Card.Middle_East_Scoring: Region.MIDDLE_EAST,
    Card.Central_America_Scoring: Region.CENTRAL_AMERICA,
    Card.Southeast_Asia_Scoring: Region.SOUTHEAST_ASIA,
}

# (minimum modified roll, VP, military operations) for a won war
WAR_TERMS: dict[Card, tuple[int, int, int]] = {
    Card.Korean_War: (4, 2, 2),
    Card.Arab_Israeli_War: (4, 2, 2),
    Card.Indo_Pakistani_War: (4, 2, 2),
    Card.Brush_War: (3, 1, 3),
}

OLYMPIC_BOYCOTT_OPS = 4


def _with_inf(state: GameState, side: Side, countries) -> list[int]:
    return [int(c) for c in countries if state.countries[c].has_influence(side)]


def _not_controlled_by(state: GameState, side: Side, countries) -> list[int]:
    return [int(c) for c in countries if not state.is_controlled(side, c)]


def _vp_for(side: Side, amount: int) -> int:
    return amount if side == Side.US else -amount


@dataclass
class EventResolver:
    """
    Resolves card events.

    Stateless between calls; everything lives in GameState.
    """
    _handlers: dict[Card, Handler] = field(init=False, repr=False)

    def __post_init__(self):
        c = Card
        self._handlers = {
            c.Duck_and_Cover: self._duck_and_cover,
            c.Five_Year_Plan: self._five_year_plan,
            c.Socialist_Governments: self._socialist_governments,
            c.Fidel: self._fidel,
            c.Vietnam_Revolts: self._vietnam_revolts,
            c.Blockade: self._blockade,
            c.Romanian_Abdication: self._romanian_abdication,
            c.Comecon: self._comecon,
            c.Nasser: self._nasser,
            c.Warsaw_Pact_Formed: self._warsaw_pact,
            c.De_Gaulle_Leads_France: self._de_gaulle,
            c.Captured_Nazi_Scientist: self._captured_nazi_scientist,
            c.Truman_Doctrine: self._truman_doctrine,
            c.Olympic_Games: self._olympic_games,
            c.NATO: self._nato,
            c.Independent_Reds: self._independent_reds,
            c.Marshall_Plan: self._marshall_plan,
            c.Containment: self._containment,
            c.CIA_Created: self._cia_created,
            c.US_Japan_Mutual_Defense_Pact: self._us_japan,
            c.Suez_Crisis: self._suez_crisis,
            c.East_European_Unrest: self._east_european_unrest,
            c.Decolonization: self._decolonization,
            c.Red_Scare_Purge: self._red_scare_purge,
            c.UN_Intervention: self._un_intervention,
            c.De_Stalinization: self._de_stalinization,
            c.Nuclear_Test_Ban: self._nuclear_test_ban,
            c.Formosan_Resolution: self._formosan_resolution,
            c.Arms_Race: self._arms_race,
            c.Cuban_Missile_Crisis: self._cuban_missile_crisis,
            c.Nuclear_Subs: self._nuclear_subs,
            c.Quagmire: self._quagmire,
            c.SALT_Negotiations: self._salt,
            c.Bear_Trap: self._bear_trap,
            c.Summit: self._summit,
        }

    def resolve(self, card: Card, side: Side, state: GameState, rng: RandomSource) -> list[Decision]:
        """Fire card's event for side. Returns follow-up decisions in resolution order."""
        logger.debug("Event %s for %s", card.name, side.name)
        if card in SCORING_REGIONS:
            score_region(SCORING_REGIONS[card], state)
            return []
        if card in WAR_TERMS:
            return self._war_decision(card, side, state)
        handler = self._handlers.get(card)
        if handler is None:
            return []
        return handler(state, side, rng)

    def resolve_special(self, card: Card, choice: int, side: Side, state: GameState,
                        rng: RandomSource) -> list[Decision]:
        """Resolve the chosen branch of a branching event."""
        logger.debug("Special event %s option %d for %s", card.name, choice, side.name)
        if card == Card.Blockade:
            if choice == 0:
                return [Decision(
                    agent=Side.US,
                    action=ActionKind.DISCARD,
                    allowed=Allowed.computed(legal.cards_at_least(state, Side.US, 3)),
                    card=card,
                )]
            state.countries[CName.WGermany].set_influence(Side.US, 0)
            return []
        if card == Card.Warsaw_Pact_Formed:
            if choice == 0:
                targets = _with_inf(state, Side.US, EASTERN_EUROPE)
                if not targets:
                    return []
                return [Decision.remove(
                    Side.USSR, Side.US, Allowed.computed(targets),
                    quantity=min(4, len(targets)), all=True, max_per_country=1,
                )]
            targets = _not_controlled_by(state, Side.US, EASTERN_EUROPE)
            if not targets:
                return []
            return [Decision.place(
                Side.USSR, Allowed.computed(targets), quantity=5, max_per_country=2,
            )]
        if card == Card.Olympic_Games:
            sponsor = side.opposite()
            if choice == 0:
                self._olympic_contest(sponsor, state, rng)
                return []
            # The boycotting side is responsible for the defcon drop
            return [
                Decision.change_defcon(side, 1),
                Decision.conduct_ops(sponsor, OLYMPIC_BOYCOTT_OPS, card),
            ]
        if card == Card.Independent_Reds:
            country = INDEPENDENT_REDS_TARGETS[choice]
            c = state.countries[country]
            c.set_influence(Side.US, max(c.us, c.ussr))
            return []
        raise ValueError(f"{card.name} has no branching event")

    # -- Wars ----------------------------------------------------------

    def _war_decision(self, card: Card, side: Side, state: GameState) -> list[Decision]:
        targets = legal.war_targets(card, state, side)
        if not targets:
            return []
        return [Decision(agent=side, action=ActionKind.WAR,
                         allowed=Allowed.computed(targets), card=card)]

    def resolve_war(self, card: Card, side: Side, country: int, state: GameState,
                    rng: RandomSource) -> bool:
        """Roll a war against country. Returns True if the attacker won."""
        need, vp, mil_ops = WAR_TERMS[card]
        defender = side.opposite()
        roll = rng.roll(side)
        modified = roll - legal.war_modifier(state, country, defender)
        state.add_mil_ops(side, mil_ops)
        won = modified >= need
        logger.debug("War %s on %s: roll %d modified %d, %s",
                     card.name, CName(country).name, roll, modified,
                     "won" if won else "lost")
        if won:
            c = state.countries[country]
            gained = c.influence(defender)
            c.set_influence(defender, 0)
            c.set_influence(side, c.influence(side) + gained)
            state.add_vp(_vp_for(side, vp))
        return won

    # -- Early War -----------------------------------------------------

    def _duck_and_cover(self, state, side, rng):
        # The phasing side answers for the degradation
        state.set_defcon(state.defcon - 1, state.side)
        if state.winner is None:
            state.add_vp(5 - state.defcon)
        return []

    def _five_year_plan(self, state, side, rng):
        card = rng.random_card_from_hand(state.deck, Side.USSR)
        if card is None:
            return []
        state.deck.discard(Side.USSR, card)
        if card.side == Side.US and legal.can_event(card, state, Side.US):
            return [Decision.event(card)]
        return []

    def _socialist_governments(self, state, side, rng):
        targets = _with_inf(state, Side.US, WESTERN_EUROPE)
        if not targets:
            return []
        return [Decision.remove(Side.USSR, Side.US, Allowed.computed(targets),
                                quantity=3, max_per_country=2)]

    def _fidel(self, state, side, rng):
        state.countries[CName.Cuba].set_influence(Side.US, 0)
        state.control(Side.USSR, CName.Cuba)
        return []

    def _vietnam_revolts(self, state, side, rng):
        state.add_influence(Side.USSR, CName.Vietnam, 2)
        return []

    def _blockade(self, state, side, rng):
        allowed = [0, 1] if legal.cards_at_least(state, Side.US, 3) else [1]
        return [Decision.special(Card.Blockade, Side.US, allowed)]

    def _romanian_abdication(self, state, side, rng):
        state.countries[CName.Romania].set_influence(Side.US, 0)
        state.control(Side.USSR, CName.Romania)
        return []

    def _comecon(self, state, side, rng):
        targets = _not_controlled_by(state, Side.US, EASTERN_EUROPE)
        if not targets:
            return []
        return [Decision.place(Side.USSR, Allowed.computed(targets),
                               quantity=min(4, len(targets)), max_per_country=1)]

    def _nasser(self, state, side, rng):
        state.add_influence(Side.USSR, CName.Egypt, 2)
        us = state.influence(Side.US, CName.Egypt)
        state.remove_influence(Side.US, CName.Egypt, (us + 1) // 2)
        return []

    def _warsaw_pact(self, state, side, rng):
        state.add_effect(Side.US, Effect.ALLOW_NATO)
        allowed = [0, 1] if _with_inf(state, Side.US, EASTERN_EUROPE) else [1]
        return [Decision.special(Card.Warsaw_Pact_Formed, Side.USSR, allowed)]

    def _de_gaulle(self, state, side, rng):
        state.remove_influence(Side.US, CName.France, 2)
        state.add_influence(Side.USSR, CName.France, 1)
        state.add_effect(Side.USSR, Effect.DE_GAULLE)
        return []

    def _captured_nazi_scientist(self, state, side, rng):
        advance_space(state, side)
        return []

    def _truman_doctrine(self, state, side, rng):
        targets = [
            c for c in _with_inf(state, Side.USSR, Region.EUROPE.countries())
            if state.controller(c) is None
        ]
        if not targets:
            return []
        return [Decision.remove(Side.US, Side.USSR, Allowed.computed(targets), all=True)]

    def _olympic_games(self, state, side, rng):
        # The opponent of the sponsor decides whether to boycott
        return [Decision.special(Card.Olympic_Games, side.opposite())]

    def _olympic_contest(self, sponsor: Side, state: GameState, rng: RandomSource) -> None:
        guest = sponsor.opposite()
        while True:
            mine = rng.roll(sponsor) + 2
            theirs = rng.roll(guest)
            if mine != theirs:
                break
        winner = sponsor if mine > theirs else guest
        state.add_vp(_vp_for(winner, 2))

    def _nato(self, state, side, rng):
        state.add_effect(Side.US, Effect.NATO)
        return []

    def _independent_reds(self, state, side, rng):
        allowed = [
            i for i, c in enumerate(INDEPENDENT_REDS_TARGETS)
            if state.influence(Side.USSR, c) > state.influence(Side.US, c)
        ]
        if not allowed:
            return []
        return [Decision.special(Card.Independent_Reds, Side.US, allowed)]

    def _marshall_plan(self, state, side, rng):
        state.add_effect(Side.US, Effect.ALLOW_NATO)
        targets = _not_controlled_by(state, Side.USSR, WESTERN_EUROPE)
        if not targets:
            return []
        return [Decision.place(Side.US, Allowed.computed(targets),
                               quantity=min(7, len(targets)), max_per_country=1)]

    def _containment(self, state, side, rng):
        state.add_effect(Side.US, Effect.CONTAINMENT)
        return []

    def _cia_created(self, state, side, rng):
        return [Decision.conduct_ops(Side.US, 1, Card.CIA_Created)]

    def _us_japan(self, state, side, rng):
        state.control(Side.US, CName.Japan)
        state.add_effect(Side.US, Effect.US_JAPAN)
        return []

    def _suez_crisis(self, state, side, rng):
        countries = (CName.France, CName.UK, CName.Israel)
        targets = _with_inf(state, Side.US, countries)
        if not targets:
            return []
        return [Decision.remove(Side.USSR, Side.US, Allowed.computed(targets),
                                quantity=4, max_per_country=2)]

    def _east_european_unrest(self, state, side, rng):
        targets = _with_inf(state, Side.USSR, EASTERN_EUROPE)
        if not targets:
            return []
        return [Decision.remove(Side.US, Side.USSR, Allowed.computed(targets),
                                quantity=min(3, len(targets)), max_per_country=1)]

    def _decolonization(self, state, side, rng):
        region = Region.AFRICA.countries() + Region.SOUTHEAST_ASIA.countries()
        targets = list(region)
        return [Decision.place(Side.USSR, Allowed.computed(targets),
                               quantity=4, max_per_country=1)]

    def _red_scare_purge(self, state, side, rng):
        state.add_effect(side.opposite(), Effect.RED_SCARE_PURGE)
        return []

    def _un_intervention(self, state, side, rng):
        opp = side.opposite()
        targets = sorted({int(c) for c in state.deck.hand(side) if c.side == opp})
        if not targets:
            return []
        return [Decision(agent=side, action=ActionKind.DISCARD,
                         allowed=Allowed.computed(targets),
                         card=Card.UN_Intervention, params={"then_ops": True})]

    def _de_stalinization(self, state, side, rng):
        sources = _with_inf(state, Side.USSR, range(NUM_COUNTRIES))
        if not sources:
            return []
        decision = Decision.remove(
            Side.USSR, Side.USSR, Allowed.computed(sources), quantity=4, relocate={},
        )
        decision.optional = True
        return [decision]

    def _nuclear_test_ban(self, state, side, rng):
        state.add_vp(_vp_for(side, max(state.defcon - 2, 0)))
        state.set_defcon(state.defcon + 2)
        return []

    def _formosan_resolution(self, state, side, rng):
        state.add_effect(Side.US, Effect.FORMOSAN_RESOLUTION)
        return []

    # -- Mid War -------------------------------------------------------

    def _arms_race(self, state, side, rng):
        opp = side.opposite()
        if state.mil_ops[side] > state.mil_ops[opp]:
            vp = 3 if state.mil_ops[side] >= state.defcon else 1
            state.add_vp(_vp_for(side, vp))
        return []

    def _cuban_missile_crisis(self, state, side, rng):
        state.set_defcon(2)
        state.add_effect(side.opposite(), Effect.CUBAN_MISSILE_CRISIS)
        return []

    def _nuclear_subs(self, state, side, rng):
        state.add_effect(Side.US, Effect.NUCLEAR_SUBS)
        return []

    def _quagmire(self, state, side, rng):
        state.clear_effect(Side.US, Effect.NATO)
        state.add_effect(Side.US, Effect.QUAGMIRE)
        return []

    def _salt(self, state, side, rng):
        state.set_defcon(state.defcon + 2)
        state.add_effect(Side.US, Effect.SALT)
        state.add_effect(Side.USSR, Effect.SALT)
        targets = sorted({int(c) for c in state.deck.discard_pile if not c.is_scoring})
        if not targets:
            return []
        return [Decision(agent=side, action=ActionKind.DISCARD,
                         allowed=Allowed.computed(targets), card=Card.SALT_Negotiations,
                         optional=True, params={"recover": True})]

    def _bear_trap(self, state, side, rng):
        state.add_effect(Side.USSR, Effect.BEAR_TRAP)
        return []

    def _summit(self, state, side, rng):
        regions = (Region.EUROPE, Region.ASIA, Region.MIDDLE_EAST, Region.AFRICA,
                   Region.CENTRAL_AMERICA, Region.SOUTH_AMERICA)
        rolls = {}
        for s in (Side.US, Side.USSR):
            bonus = sum(
                1 for r in regions
                if status(r, state)[0][s] >= RegionStatus.DOMINATION
            )
            rolls[s] = rng.roll(s) + bonus
        if rolls[Side.US] != rolls[Side.USSR]:
            winner = Side.US if rolls[Side.US] > rolls[Side.USSR] else Side.USSR
            state.add_vp(_vp_for(winner, 2))
        return []
