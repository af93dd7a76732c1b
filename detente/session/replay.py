"""
Replay - Plays a recorded game back through the engine.

A replay pairs two ScriptedAgents with a ScriptedRandom. Checks can be
attached to positions in the choice history; each runs once, right after
the choice that brings the history to its position, and can assert on the
live game state.

The replay ends when a side wins or when both scripts are used up.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable

from ..engine_core.errors import ScriptExhausted
from ..engine_core.state import GameState
from ..games.twilight.countries import Side
from .game_loop import GameLoop, Win

if TYPE_CHECKING:
    from ..bots.policy import ScriptedAgent
    from ..config import EngineConfig
    from ..engine_core.pending import Interpreter
    from ..engine_core.random_source import ScriptedRandom

logger = logging.getLogger(__name__)

Check = Callable[["Replay"], None]


class Replay:
    """
    Usage:
        replay = Replay(ScriptedAgent(Side.US, us), ScriptedAgent(Side.USSR, ussr), rng)
        replay.add_check(12, lambda r: assert_vp(r.state, 2))
        win = replay.play()
    """

    def __init__(
        self,
        us_agent: ScriptedAgent,
        ussr_agent: ScriptedAgent,
        rng: ScriptedRandom,
        state: GameState | None = None,
        config: EngineConfig | None = None,
    ):
        self.us_agent = us_agent
        self.ussr_agent = ussr_agent
        self.rng = rng
        self.game = GameLoop(
            state or GameState.new_game(),
            {Side.US: us_agent, Side.USSR: ussr_agent},
            rng,
            config=config,
        )
        self._checks: dict[int, list[Check]] = {}
        self.checks_run = 0
        self.game.interpreter.listeners.append(self._after_step)

    @property
    def state(self) -> GameState:
        return self.game.state

    @property
    def history(self):
        return self.game.history

    def add_check(self, trigger: int, check: Check) -> None:
        """Run check once the history holds trigger choices."""
        self._checks.setdefault(trigger, []).append(check)

    def _after_step(self, interpreter: Interpreter) -> None:
        for check in self._checks.pop(len(interpreter.history), []):
            check(self)
            self.checks_run += 1

    def finished(self) -> bool:
        return self.us_agent.remaining() == 0 and self.ussr_agent.remaining() == 0

    def play(self, deal: bool = True) -> Win | None:
        """
        Play until a win or the end of both scripts.

        Returns the Win, or None if the record ended first. A script that
        runs out while the other still has choices is an error.
        """
        try:
            self.game.setup(deal=deal)
            return self.game.play()
        except ScriptExhausted:
            if not self.finished():
                raise
            logger.info("Replay ended after %d choices", len(self.history))
            return None
