"""
API Module - HTTP interface to the engine.

Clients:
1. Create a bot-vs-bot game
2. Step it a turn at a time, or play it out
3. Inspect state and the candidates an agent would see
4. End it

All state is session-scoped and in memory.
"""

from .schemas import (
    CreateGameRequest,
    StepRequest,
    GameStateResponse,
    LegalChoicesResponse,
    StepResponse,
    CatalogResponse,
    ErrorResponse,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    "CreateGameRequest",
    "StepRequest",
    "GameStateResponse",
    "LegalChoicesResponse",
    "StepResponse",
    "CatalogResponse",
    "ErrorResponse",
    "ErrorCode",
    "APIService",
    "create_app",
]
