"""
Session Manager - Creates and manages in-memory games.

A session is one game between two agents:
- Created with an agent type per side and an optional seed
- Advanced one turn at a time, or played to completion
- Destroyed when the caller ends it

Sessions are EPHEMERAL: nothing is persisted, and each session owns its
own state, decision stack and randomness source.
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..bots.policy import make_agent
from ..config import EngineConfig
from ..engine_core.random_source import InternalRandom
from ..engine_core.state import GameState
from ..games.twilight.countries import Side
from .game_loop import GameLoop, Win

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


@dataclass
class Session:
    """An ephemeral game session."""
    session_id: str
    loop: GameLoop
    created_at: float
    agent_names: dict[Side, str] = field(default_factory=dict)
    seed: int | None = None
    state: SessionState = SessionState.ACTIVE
    result: Win | None = None

    @property
    def game(self) -> GameState:
        return self.loop.state

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def step(self) -> Win | None:
        """Play one turn, or final scoring once the last turn is done."""
        if not self.is_active():
            return self.result
        if self.game.turn > self.loop.config.turns:
            win = self.loop.final_scoring()
        else:
            win = self.loop.do_turn()
        if win is not None:
            self.result = win
            self.state = SessionState.GAME_OVER
            logger.info("Session %s over: %s by %s", self.session_id,
                        win.side.name, win.reason)
        return win

    def play_out(self) -> Win:
        while self.result is None:
            self.step()
        return self.result


class SessionManager:
    """
    Tracks active sessions.

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        us_agent: str = "heuristic",
        ussr_agent: str = "heuristic",
        seed: int | None = None,
        turns: int | None = None,
    ) -> Session:
        """
        Create and set up a new game.

        Raises ValueError for an unknown agent type.
        """
        seed = seed if seed is not None else self.config.seed
        agents = {
            Side.US: make_agent(us_agent, Side.US, seed),
            Side.USSR: make_agent(ussr_agent, Side.USSR, None if seed is None else seed + 1),
        }
        config = EngineConfig(
            env=self.config.env,
            seed=seed,
            turns=turns or self.config.turns,
            log_level=self.config.log_level,
            allowed_origins=self.config.allowed_origins,
        )
        loop = GameLoop(GameState.new_game(), agents, InternalRandom(seed), config=config)
        loop.setup()

        session = Session(
            session_id=str(uuid.uuid4()),
            loop=loop,
            created_at=time.time(),
            agent_names={Side.US: us_agent, Side.USSR: ussr_agent},
            seed=seed,
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s (%s vs %s)", session.session_id, us_agent, ussr_agent)
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """Remove a session. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.is_active():
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        return [sid for sid, s in self._sessions.items() if s.is_active()]
