"""
FastAPI Application - REST API for running engine games.

Endpoints:
    POST   /api/v1/games              Create a bot-vs-bot game
    GET    /api/v1/games              List active games
    GET    /api/v1/games/{id}         Get game state
    GET    /api/v1/games/{id}/legal   Candidates for the next action round
    POST   /api/v1/games/{id}/step    Play one or more turns
    DELETE /api/v1/games/{id}         End a game
    GET    /api/v1/catalog            Flat action space layout
    GET    /health                    Health check

All responses are JSON with explicit Pydantic schemas. Engine failures
are returned as ErrorResponse bodies with an ErrorCode.
"""

from typing import Annotated, Optional, Union
import logging
import os

# Environment configuration
DETENTE_ENV = os.getenv("DETENTE_ENV", "development")
ALLOWED_ORIGINS = os.getenv("DETENTE_ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install 'detente[api]'"
        )

    from ..config import EngineConfig
    from ..engine_core.errors import EngineError, IllegalChoice
    from ..games.twilight.countries import Side
    from ..session import SessionManager
    from .service import APIService
    from .schemas import (
        CreateGameRequest,
        StepRequest,
        GameStateResponse,
        LegalChoicesResponse,
        StepResponse,
        EndGameResponse,
        GameListResponse,
        CatalogResponse,
        HealthResponse,
        ErrorResponse,
        ErrorCode,
    )

    app = FastAPI(
        title="Detente Engine API",
        description="""
Decision-resolution engine for a two-player Cold War card game.

Games are played bot against bot and advanced a turn at a time.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist |
| `INVALID_AGENT` | Unknown agent type |
| `ILLEGAL_CHOICE` | An agent chose something it was not offered |
| `ENGINE_ERROR` | The engine failed while resolving decisions |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(EngineConfig.from_env())
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def not_found(response: ErrorResponse) -> JSONResponse:
        return make_error_response(response.error_code, response.error, status_code=404)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameStateResponse, JSONResponse]:
        """Create a game, deal opening hands and place starting influence."""
        try:
            return api_service.create_game(request)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_AGENT, str(e))
        except EngineError as e:
            logger.warning("Game setup failed: %s", e)
            return make_error_response(ErrorCode.ENGINE_ERROR, str(e), status_code=500)

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game(game_id)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.get(
        "/api/v1/games/{game_id}/legal",
        response_model=LegalChoicesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Candidates for the next action round",
    )
    async def legal_choices(
        game_id: str,
        side: Annotated[Optional[str], Query(description="US or USSR")] = None,
    ) -> Union[LegalChoicesResponse, JSONResponse]:
        chosen = None
        if side is not None:
            if side.upper() not in ("US", "USSR"):
                return make_error_response(ErrorCode.VALIDATION_ERROR, f"Unknown side: {side}")
            chosen = Side[side.upper()]
        try:
            response = api_service.legal_choices(game_id, chosen)
        except EngineError as e:
            return make_error_response(ErrorCode.ENGINE_ERROR, str(e), status_code=500)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.post(
        "/api/v1/games/{game_id}/step",
        response_model=StepResponse,
        responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Play turns",
    )
    async def step_game(
        game_id: str,
        request: Optional[StepRequest] = None,
    ) -> Union[StepResponse, JSONResponse]:
        try:
            response = api_service.step(game_id, request or StepRequest())
        except IllegalChoice as e:
            return make_error_response(ErrorCode.ILLEGAL_CHOICE, str(e), status_code=500)
        except EngineError as e:
            logger.warning("Game %s failed: %s", game_id, e)
            return make_error_response(
                ErrorCode.ENGINE_ERROR, str(e), status_code=500,
                details={"type": type(e).__name__},
            )
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(
        game_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndGameResponse:
        success = api_service.end_game(game_id, reason)
        return EndGameResponse(success=success, game_id=game_id)

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["System"],
        summary="Flat action space layout",
    )
    async def catalog() -> CatalogResponse:
        return api_service.catalog()

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="detente-engine",
            version="1.0.0",
        )

    @app.get("/", tags=["System"])
    async def root():
        return {
            "service": "Detente Engine API",
            "env": DETENTE_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
