"""
FastAPI Application - Local HTTP bridge for a UI front-end.

Endpoints:
    GET    /api/v1/opponents                   List scripted opponents
    GET    /api/v1/cheats                      Cheat catalog
    POST   /api/v1/sessions                    Create a match session
    GET    /api/v1/sessions                    List sessions
    GET    /api/v1/sessions/{id}               Get session (state + events)
    DELETE /api/v1/sessions/{id}               End session
    GET    /api/v1/sessions/{id}/state         Get match state
    GET    /api/v1/sessions/{id}/events        Get events from a cursor on
    POST   /api/v1/sessions/{id}/commands      Submit a player command

One player per session. After every accepted command the scripted
opponent answers before the response is sent, so the returned state is
always the player's move or the end of the match.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging
import os

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from .service import APIService
from .schemas import (
    CreateSessionRequest,
    CommandRequest,
    SessionResponse,
    MatchStateResponse,
    CommandResponse,
    EventLogResponse,
    CheatCatalogResponse,
    OpponentListResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)

# Environment configuration
WIZWAR_ENV = os.getenv("WIZWAR_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SESSION_TTL_SECONDS = int(os.getenv("WIZWAR_SESSION_TTL", "3600"))


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Wizard's War Engine API",
        description="""
Card-battle engine with a cheat system, played against scripted opponents.

## Flow

1. `POST /sessions` deals a match and returns the player's view.
2. `POST /sessions/{id}/commands` plays a card, attempts a cheat or uses
   a table item. The opponent answers before the response is sent.
3. Once `status` is `game_over`, only `restart` is accepted.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `UNKNOWN_OPPONENT` | No opponent with that name |
| `INVALID_DECK` | Deck text could not be parsed |
| `NOT_YOUR_TURN`, `CHEAT_LOCKED`, ... | Command rejected by the engine |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        debug=WIZWAR_ENV == "development",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        status_code = 404 if error.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/opponents",
        response_model=OpponentListResponse,
        tags=["Catalog"],
        summary="List scripted opponents",
    )
    async def list_opponents() -> OpponentListResponse:
        return api_service.list_opponents()

    @app.get(
        "/api/v1/cheats",
        response_model=CheatCatalogResponse,
        tags=["Catalog"],
        summary="Cheat catalog",
    )
    async def cheat_catalog() -> CheatCatalogResponse:
        """Every cheat with its class (who watches it) and cost."""
        return api_service.cheat_catalog()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid parameters"}},
        tags=["Sessions"],
        summary="Create a new match session",
    )
    async def create_session(
        request: CreateSessionRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        """Deal a new match against a scripted opponent."""
        removed = api_service.cleanup_stale_sessions(SESSION_TTL_SECONDS)
        if removed:
            logger.info("Removed %d stale session(s)", removed)

        response = api_service.create_session(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the session with its state and full event log."""
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a match session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a session and release its state."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=MatchStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get the match state",
    )
    async def get_state(session_id: str) -> Union[MatchStateResponse, JSONResponse]:
        response = api_service.get_state(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/events",
        response_model=EventLogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get events from a cursor on",
    )
    async def get_events(
        session_id: str,
        cursor: int = Query(0, ge=0, description="Index of the first event to return"),
    ) -> Union[EventLogResponse, JSONResponse]:
        response = api_service.get_events(session_id, cursor)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/commands",
        response_model=CommandResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Command rejected"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game Loop"],
        summary="Submit a player command",
    )
    async def submit_command(
        session_id: str,
        request: CommandRequest,
    ) -> Union[CommandResponse, JSONResponse]:
        """
        Play a card, attempt a cheat, use a table item or restart.

        A caught cheat is not an error: the match ends with a
        `game_over` event and `result` = `caught_cheating`.
        """
        response = api_service.submit_command(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", service="wizwar-engine", version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Wizard's War Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn wizwar.api.app:app
app = create_app()
