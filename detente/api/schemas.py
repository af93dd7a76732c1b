"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Error Codes:
- GAME_NOT_FOUND: Game does not exist or has been ended
- INVALID_AGENT: Unknown agent type requested
- ILLEGAL_CHOICE: An agent produced a choice that was not offered
- ENGINE_ERROR: Any other engine failure while resolving decisions
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    """Game status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class AgentType(str, Enum):
    """Built-in agents."""
    RANDOM = "random"
    FIRST = "first"
    HEURISTIC = "heuristic"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_AGENT = "INVALID_AGENT"
    ILLEGAL_CHOICE = "ILLEGAL_CHOICE"
    ENGINE_ERROR = "ENGINE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Nested models
# =============================================================================

class CountryInfo(BaseModel):
    """Influence in one country."""
    name: str
    us: int = 0
    ussr: int = 0
    controller: Optional[str] = Field(None, description="US, USSR or null")
    battleground: bool = False


class WinInfo(BaseModel):
    """Outcome of a finished game."""
    side: str
    margin: int = Field(description="Signed VP, positive favours the US")
    reason: str


class ChoiceInfo(BaseModel):
    """One encoded candidate."""
    index: int = Field(description="Flat action index")
    kind: str
    choice: int
    description: str


class CatalogEntry(BaseModel):
    """Placement of one action kind in the flat action space."""
    kind: str
    offset: int
    arity: int


# =============================================================================
# Requests
# =============================================================================

class CreateGameRequest(BaseModel):
    """Start a new bot-vs-bot game."""
    us_agent: AgentType = AgentType.HEURISTIC
    ussr_agent: AgentType = AgentType.HEURISTIC
    seed: Optional[int] = None
    turns: Optional[int] = Field(None, ge=1, le=10, description="Last turn to play")


class StepRequest(BaseModel):
    """Advance a game."""
    turns: int = Field(1, ge=1, le=10, description="Turns to play")
    play_out: bool = Field(False, description="Play to the end of the game")


# =============================================================================
# Responses
# =============================================================================

class GameStateResponse(BaseModel):
    """Snapshot of a game."""
    game_id: str
    status: GameStatus
    turn: int
    action_round: int
    phasing: str
    vp: int
    defcon: int
    space: dict[str, int] = Field(default_factory=dict)
    mil_ops: dict[str, int] = Field(default_factory=dict)
    hand_sizes: dict[str, int] = Field(default_factory=dict)
    effects: dict[str, list[str]] = Field(default_factory=dict)
    countries: list[CountryInfo] = Field(default_factory=list)
    agents: dict[str, str] = Field(default_factory=dict)
    choices_made: int = 0
    result: Optional[WinInfo] = None


class LegalChoicesResponse(BaseModel):
    """Candidates for the next action round of a side."""
    game_id: str
    side: str
    choices: list[ChoiceInfo] = Field(default_factory=list)


class StepResponse(BaseModel):
    """Result of advancing a game."""
    game_id: str
    turns_played: int
    finished: bool
    state: GameStateResponse


class EndGameResponse(BaseModel):
    """Result of ending a game."""
    success: bool
    game_id: str


class GameListResponse(BaseModel):
    """Active game ids."""
    games: list[str] = Field(default_factory=list)
    count: int = 0


class CatalogResponse(BaseModel):
    """The flat action space layout."""
    size: int
    entries: list[CatalogEntry] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error payload."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
