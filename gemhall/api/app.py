"""
FastAPI Application - REST API for playing against computer opponents.

Endpoints:
    GET    /api/v1/health                       Health check
    POST   /api/v1/sessions                     Create game session
    GET    /api/v1/sessions                     List active sessions
    GET    /api/v1/sessions/{id}                Get session status
    DELETE /api/v1/sessions/{id}                End session
    GET    /api/v1/sessions/{id}/state          Get game state
    GET    /api/v1/sessions/{id}/actions        Legal actions for the human
    POST   /api/v1/sessions/{id}/actions        Submit an action

Computer Turn Flow:
    1. POST /actions applies the human action
    2. After an end_turn, computer opponents play until the human is
       next or the game is over
    3. Response includes every applied action in `applied_actions`

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import get_settings
from .service import APIService
from .schemas import (
    # Request models
    ActionRequest,
    CreateSessionRequest,
    # Response models
    ActionsResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    # Enums
    ErrorCode,
)


ERROR_STATUS = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.NOT_YOUR_TURN: 409,
    ErrorCode.GAME_FINISHED: 409,
    ErrorCode.ILLEGAL_ACTION: 400,
    ErrorCode.INVALID_TRANSITION: 400,
    ErrorCode.VALIDATION_ERROR: 422,
}


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Gem Hall API",
        description="""
Gem trading card game against computer opponents.

## Computer Turns

Submitting `end_turn` via `POST /actions` hands play to the computer
opponents. The response comes back once the human is next (or the game
is over) and lists every action applied along the way.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `NOT_YOUR_TURN` | Action is for a player who is not the current actor |
| `ILLEGAL_ACTION` | Action is not legal in the current state |
| `INVALID_TRANSITION` | Engine refused the action |
| `VALIDATION_ERROR` | Request body is malformed |
| `GAME_FINISHED` | The game is over |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

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

    def from_error(error: ErrorResponse) -> JSONResponse:
        return make_error_response(
            error.error_code,
            error.error,
            status_code=ERROR_STATUS.get(error.error_code, 400),
            details=error.details,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={422: {"model": ErrorResponse, "description": "Invalid parameters"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(request: CreateSessionRequest) -> SessionResponse:
        """
        Deal a new game with the human in the first seat and one
        computer opponent per entry in `opponents`.
        """
        return await api_service.create_session(request)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Full board, players and phase."""
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="List legal actions",
    )
    async def get_actions(
        session_id: str,
        player_idx: Annotated[
            Optional[int], Query(description="Player to list for (defaults to the human)")
        ] = None,
    ) -> Union[ActionsResponse, JSONResponse]:
        """
        Legal actions for a player. Each entry can be posted back
        unchanged to `POST /actions`.
        """
        response = api_service.get_actions(session_id, player_idx)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Illegal action"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Not your turn or game finished"},
        },
        tags=["Game"],
        summary="Submit an action",
    )
    async def submit_action(
        session_id: str, request: ActionRequest
    ) -> Union[TurnResponse, JSONResponse]:
        """
        Apply an action for the human player.

        An `end_turn` also plays every computer turn up to the human's
        next turn; those actions are listed in `applied_actions`.
        """
        response = await api_service.submit_action(session_id, request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="gemhall",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Gem Hall API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn gemhall.api.app:app
app = create_app()
