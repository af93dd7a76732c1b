"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session calls
2. Converts engine state to response models
3. Reports missing games as ErrorResponse values

This layer is framework-agnostic. Engine errors raised while a game is
advanced propagate to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..bots.policy import AGENT_TYPES
from ..engine_core.action import Decision, get_catalog
from ..engine_core.encoder import describe
from ..games.twilight.countries import NUM_COUNTRIES, Side
from ..session import Session, SessionManager, SessionState
from .schemas import (
    CatalogEntry,
    CatalogResponse,
    ChoiceInfo,
    CountryInfo,
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    GameStatus,
    LegalChoicesResponse,
    StepRequest,
    StepResponse,
    WinInfo,
)


@dataclass
class APIService:
    """
    Usage:
        service = APIService()
        state = service.create_game(CreateGameRequest(seed=7))
        service.step(state.game_id, StepRequest(play_out=True))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        """Raises ValueError for an unknown agent type."""
        for name in (request.us_agent.value, request.ussr_agent.value):
            if name not in AGENT_TYPES:
                raise ValueError(f"Unknown agent type: {name}")
        session = self.session_manager.create_session(
            us_agent=request.us_agent.value,
            ussr_agent=request.ussr_agent.value,
            seed=request.seed,
            turns=request.turns,
        )
        return self._state_response(session)

    def get_game(self, game_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if session is None:
            return _not_found(game_id)
        return self._state_response(session)

    def legal_choices(self, game_id: str, side: Side | None = None) -> LegalChoicesResponse | ErrorResponse:
        """Candidates a side would be offered at the start of an action round."""
        session = self.session_manager.get_session(game_id)
        if session is None:
            return _not_found(game_id)
        side = side if side is not None else session.game.side
        decision = Decision.begin_round(side)
        choices = [
            ChoiceInfo(
                index=c.flat,
                kind=c.kind.value,
                choice=c.choice,
                description=describe(c),
            )
            for c in session.loop.interpreter.legal_choices(decision)
        ]
        return LegalChoicesResponse(game_id=game_id, side=side.name, choices=choices)

    def step(self, game_id: str, request: StepRequest) -> StepResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if session is None:
            return _not_found(game_id)
        played = 0
        if request.play_out:
            turn = session.game.turn
            session.play_out()
            played = session.game.turn - turn
        else:
            for _ in range(request.turns):
                if not session.is_active():
                    break
                session.step()
                played += 1
        return StepResponse(
            game_id=game_id,
            turns_played=played,
            finished=not session.is_active(),
            state=self._state_response(session),
        )

    def end_game(self, game_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(game_id, reason)

    def list_games(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def catalog(self) -> CatalogResponse:
        catalog = get_catalog()
        return CatalogResponse(
            size=catalog.size,
            entries=[
                CatalogEntry(kind=k.value, offset=catalog.offset(k), arity=catalog.arity(k))
                for k in catalog.kinds
            ],
        )

    # -- Conversion ------------------------------------------------------

    def _state_response(self, session: Session) -> GameStateResponse:
        game = session.game
        sides = (Side.US, Side.USSR)
        countries = []
        for c in range(NUM_COUNTRIES):
            country = game.countries[c]
            if not (country.us or country.ussr):
                continue
            owner = country.controller()
            countries.append(CountryInfo(
                name=country.name.name,
                us=country.us,
                ussr=country.ussr,
                controller=owner.name if owner is not None else None,
                battleground=country.battleground,
            ))
        result = None
        if session.result is not None:
            result = WinInfo(
                side=session.result.side.name,
                margin=session.result.margin,
                reason=session.result.reason,
            )
        return GameStateResponse(
            game_id=session.session_id,
            status=_status(session.state),
            turn=game.turn,
            action_round=game.ar,
            phasing=game.side.name,
            vp=game.vp,
            defcon=game.defcon,
            space={s.name: game.space[s] for s in sides},
            mil_ops={s.name: game.mil_ops[s] for s in sides},
            hand_sizes={s.name: len(game.deck.hand(s)) for s in sides},
            effects={s.name: [e.name for e in game.effects[s]] for s in sides},
            countries=countries,
            agents={s.name: name for s, name in session.agent_names.items()},
            choices_made=len(session.loop.history),
            result=result,
        )


def _status(state: SessionState) -> GameStatus:
    return {
        SessionState.ACTIVE: GameStatus.ACTIVE,
        SessionState.GAME_OVER: GameStatus.GAME_OVER,
        SessionState.ABANDONED: GameStatus.ABANDONED,
    }[state]


def _not_found(game_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Game not found: {game_id}",
        error_code=ErrorCode.GAME_NOT_FOUND,
    )
