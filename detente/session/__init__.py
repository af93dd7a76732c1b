"""
Session Module - Runs games.

- GameLoop drives one game turn by turn
- Replay plays a recorded game back with checks along the way
- SessionManager keeps in-memory games for the API

Sessions are EPHEMERAL: no persistence.
"""

from .game_loop import GameLoop, Win
from .replay import Replay
from .manager import SessionManager, Session, SessionState

__all__ = [
    "GameLoop",
    "Win",
    "Replay",
    "SessionManager",
    "Session",
    "SessionState",
]
