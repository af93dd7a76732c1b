"""
Game Loop - The turn driver.

The loop, per turn:
1. Headline: both sides pick an event at once, higher ops resolves first
2. Action rounds: each side seeds a BEGIN_ROUND and the interpreter drains it
3. End of turn: held scoring cards, military operations penalty, defcon
   improvement, effect expiry, China card turns face up, hands refill

Instant wins end the loop as soon as the interpreter stops. After the last
turn, every region is scored and the VP decide the game.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from ..config import EngineConfig
from ..engine_core.action import ActionKind, Allowed, Decision
from ..engine_core.pending import Interpreter, PendingStack
from ..engine_core.reducer import Reducer
from ..engine_core.state import WIN_VP, GameState
from ..games.twilight import legal
from ..games.twilight.cards import EARLY_WAR, MID_WAR, Card
from ..games.twilight.countries import EASTERN_EUROPE, WESTERN_EUROPE, Side
from ..games.twilight.events import EventResolver
from ..games.twilight.scoring import FINAL_SCORING_ORDER, score_region

if TYPE_CHECKING:
    from ..bots.policy import Agent
    from ..engine_core.random_source import RandomSource

logger = logging.getLogger(__name__)

MID_WAR_TURN = 4
SETUP_PLACEMENTS = {Side.USSR: 6, Side.US: 7}

TurnHook = Callable[[GameState], None]


@dataclass(frozen=True)
class Win:
    """
    Result of a game.

    margin is signed VP (positive favours the US); instant wins are
    recorded as +20 or -20.
    """
    side: Side
    margin: int
    reason: str

    @classmethod
    def instant(cls, side: Side, reason: str) -> Win:
        return cls(side, WIN_VP if side == Side.US else -WIN_VP, reason)


class GameLoop:
    """
    Drives a whole game.

    Usage:
        loop = GameLoop(GameState.new_game(), agents, InternalRandom(seed))
        win = loop.play()
    """

    def __init__(
        self,
        state: GameState,
        agents: dict[Side, Agent],
        rng: RandomSource,
        events: EventResolver | None = None,
        config: EngineConfig | None = None,
    ):
        self.state = state
        self.agents = agents
        self.rng = rng
        self.events = events or EventResolver()
        self.config = config or EngineConfig()
        self.reducer = Reducer(self.events, rng)
        self.interpreter = Interpreter(state, agents, self.reducer)
        self.stack = PendingStack()
        self.turn_hooks: list[TurnHook] = []
        self.is_setup = False

    @property
    def history(self):
        return self.interpreter.history

    def run(self, decisions: list[Decision]) -> None:
        """Push decisions and resolve them to completion."""
        self.stack.extend(decisions)
        self.interpreter.resolve(self.stack)

    # -- Setup ---------------------------------------------------------

    def deal(self) -> None:
        """Shuffle the Early War deck and deal opening hands."""
        deck = self.state.deck
        deck.discard_pile = list(EARLY_WAR)
        self.rng.reshuffle(deck)
        deck.draw_cards(self.state.hand_size, self.rng)

    def setup(self, deal: bool = True) -> None:
        """Deal, then place the USSR's and the US's free starting influence."""
        if deal:
            self.deal()
        self.state.ar = 0
        for side, region in ((Side.USSR, EASTERN_EUROPE), (Side.US, WESTERN_EUROPE)):
            self.state.side = side
            self.run([Decision.place(side, Allowed.fixed(region), SETUP_PLACEMENTS[side])])
        self.state.side = Side.USSR
        self.is_setup = True

    # -- Play ----------------------------------------------------------

    def play(self) -> Win:
        if not self.is_setup:
            self.setup()
        logger.info("Game start, playing to turn %d", self.config.turns)
        while self.state.turn <= self.config.turns:
            win = self.do_turn()
            if win is not None:
                return win
        return self.final_scoring()

    def _instant_win(self) -> Win | None:
        if self.state.winner is None:
            return None
        return Win.instant(self.state.winner, self.state.win_reason or "instant")

    def do_turn(self) -> Win | None:
        """Play one turn. Returns a Win if the game ended during it."""
        state = self.state
        logger.info("Turn %d: vp %d, defcon %d", state.turn, state.vp, state.defcon)
        state.mil_ops = [0, 0]
        state.space_attempts = [0, 0]

        self.headline()
        if (win := self._instant_win()) is not None:
            return win

        for ar in range(1, state.ars_per_turn + 2):
            state.ar = ar
            for side in (Side.USSR, Side.US):
                if ar > state.max_ar(side):
                    continue
                state.side = side
                self.run([Decision.begin_round(side)])
                if (win := self._instant_win()) is not None:
                    return win

        win = self.end_turn()
        for hook in self.turn_hooks:
            hook(state)
        return win

    def headline(self) -> None:
        """Both sides choose a headline card, then resolve in ops order."""
        state = self.state
        state.ar = 0
        chosen: dict[Side, Card] = {}
        for side in (Side.USSR, Side.US):
            if not legal.headline_cards(state, side):
                continue
            state.side = side
            choice, _ = self.interpreter.choose(Decision(agent=side, action=ActionKind.EVENT))
            self.interpreter.record(choice)
            chosen[side] = Card(choice.choice)
        for side, card in chosen.items():
            state.deck.play_card(side, card)

        # Higher ops first; the US goes first on ties
        order = sorted(chosen.items(), key=lambda item: (-item[1].ops, item[0] != Side.US))
        for side, card in order:
            logger.debug("%s headlines %s", side.name, card.name)
            if not legal.can_event(card, state, side):
                continue
            state.side = side
            self.run([Decision.event(card, side)])
            if state.winner is not None:
                return

    def end_turn(self) -> Win | None:
        state, deck = self.state, self.state.deck
        us_held = deck.held_scoring(Side.US)
        ussr_held = deck.held_scoring(Side.USSR)
        if us_held or ussr_held:
            # The US wins if both sides held one
            winner = Side.USSR if us_held and not ussr_held else Side.US
            state.declare_winner(winner, "held_scoring")
            return self._instant_win()

        us_penalty = max(state.defcon - state.mil_ops[Side.US], 0)
        ussr_penalty = max(state.defcon - state.mil_ops[Side.USSR], 0)
        state.add_vp(ussr_penalty - us_penalty)
        if (win := self._instant_win()) is not None:
            return win

        state.set_defcon(state.defcon + 1)
        state.expire_effects()
        deck.china_up = True
        state.turn += 1
        if state.turn == MID_WAR_TURN:
            logger.info("Mid War cards enter the deck")
            deck.add_cards(MID_WAR, self.rng)
        if state.turn <= self.config.turns:
            deck.draw_cards(state.hand_size, self.rng)
        return None

    def final_scoring(self) -> Win:
        for region in FINAL_SCORING_ORDER:
            score_region(region, self.state)
            if (win := self._instant_win()) is not None:
                return win
        vp = self.state.vp
        side = Side.US if vp >= 0 else Side.USSR
        logger.info("Final scoring: %s wins with vp %d", side.name, vp)
        return Win(side, vp, "final_scoring")
