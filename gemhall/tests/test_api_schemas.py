"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- The OpenAPI schema lists every route and model
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ActionInfo,
    ActionRequest,
    CardInfo,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    PlayerInfo,
    SessionStatus,
    TurnResponse,
)
from ..engine_core.action import ActionType


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_create_session_defaults(self):
        request = CreateSessionRequest()
        assert request.player_name == "You"
        assert [d.value for d in request.opponents] == ["medium"]
        assert request.random_seed is None

    @pytest.mark.parametrize("opponents", [[], ["easy"] * 4])
    def test_opponent_count_limits(self, opponents):
        with pytest.raises(ValidationError):
            CreateSessionRequest(opponents=opponents)

    def test_action_request_from_json(self):
        request = ActionRequest.model_validate(
            {"action_type": "take_gems", "gems": ["red", "blue", "green"]}
        )
        assert request.action_type == ActionType.TAKE_GEMS
        assert request.player_idx is None

    def test_action_request_ignores_description(self):
        info = ActionInfo(
            action_type=ActionType.RESERVE_CARD,
            player_idx=0,
            card_id="L1-01",
            description="reserves L1-01",
        )
        request = ActionRequest.model_validate(info.model_dump(mode="json"))
        assert request.card_id == "L1-01"

    def test_unknown_action_type(self):
        with pytest.raises(ValidationError):
            ActionRequest.model_validate({"action_type": "fly"})

    def test_game_state_serializes(self):
        state = GameStateResponse(
            session_id="s-1",
            status=SessionStatus.YOUR_TURN,
            phase="active",
            turn_number=4,
            current_player_idx=0,
            players=[PlayerInfo(player_id="human_1", name="Ann", is_human=True)],
            displayed={"1": [CardInfo(card_id="L1-01", tier=1, points=0, bonus="red",
                                      cost={"white": 2, "black": 2})]},
        )
        data = state.model_dump(mode="json")
        assert data["status"] == "your_turn"
        assert data["displayed"]["1"][0]["cost"] == {"white": 2, "black": 2}
        assert data["pending_discard"] is None
        assert data["api_version"] == "v1"

    def test_turn_response_nests_state(self):
        state = GameStateResponse(
            session_id="s-1", status=SessionStatus.GAME_OVER, phase="finished",
            turn_number=40, current_player_idx=1, winner_idx=1, winner_name="Bot",
        )
        response = TurnResponse(
            session_id="s-1", success=True, status=SessionStatus.GAME_OVER,
            applied_actions=["Ann: ends turn"], game_state=state,
        )
        data = response.model_dump()
        assert data["game_state"]["winner_name"] == "Bot"


class TestErrorCodes:
    """Tests for structured errors."""

    def test_required_error_codes_exist(self):
        required_codes = [
            "SESSION_NOT_FOUND",
            "NOT_YOUR_TURN",
            "ILLEGAL_ACTION",
            "INVALID_TRANSITION",
            "VALIDATION_ERROR",
            "GAME_FINISHED",
        ]
        for code in required_codes:
            assert hasattr(ErrorCode, code), f"Missing error code: {code}"
            assert ErrorCode[code].value == code

    def test_error_code_values_are_strings(self):
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()

    def test_error_response(self):
        error = ErrorResponse(
            error="Card is not on display",
            error_code=ErrorCode.INVALID_TRANSITION,
            details={"reason": "CARD_NOT_AVAILABLE"},
        )
        data = error.model_dump(mode="json")
        assert data["error_code"] == "INVALID_TRANSITION"
        assert data["details"] == {"reason": "CARD_NOT_AVAILABLE"}
        assert data["api_version"] == "v1"


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self):
        from fastapi.openapi.utils import get_openapi
        from ..api.app import app

        return get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

    def test_openapi_schema_generates(self, schema):
        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]
        for name in [
            "SessionResponse",
            "GameStateResponse",
            "ActionsResponse",
            "TurnResponse",
            "ErrorResponse",
            "HealthResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_routes(self, schema):
        paths = schema["paths"]
        expected = {
            "/api/v1/health": {"get"},
            "/api/v1/sessions": {"get", "post"},
            "/api/v1/sessions/{session_id}": {"get", "delete"},
            "/api/v1/sessions/{session_id}/state": {"get"},
            "/api/v1/sessions/{session_id}/actions": {"get", "post"},
        }
        for path, methods in expected.items():
            assert path in paths, f"Missing path: {path}"
            assert methods <= set(paths[path])
            for method in methods:
                assert "200" in paths[path][method]["responses"]

    def test_submit_action_documents_errors(self, schema):
        responses = schema["paths"]["/api/v1/sessions/{session_id}/actions"]["post"]["responses"]
        assert {"400", "404", "409"} <= set(responses)
