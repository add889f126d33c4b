"""
Tests for API layer.

Tests:
- API service methods
- HTTP routes through the FastAPI test client
- Session lifecycle via API
- Error handling
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from ..engine_core.state import GamePhase
from ..api.app import create_app
from ..api.schemas import (
    ActionRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    SessionStatus,
    TurnResponse,
)
from ..api.service import APIService
from ..bots.profile import Difficulty
from ..engine_core.action import ActionType
from ..session import SessionManager, no_delay


@pytest.fixture
def service():
    """A fresh API service whose bots do not wait."""
    return APIService(session_manager=SessionManager(delay=no_delay, think_time=0))


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


@pytest.fixture
def session_id(client):
    response = client.post(
        "/api/v1/sessions",
        json={"player_name": "Tester", "opponents": ["easy", "hard"], "random_seed": 3},
    )
    assert response.status_code == 200
    return response.json()["session_id"]


def first_of_type(actions, action_type):
    return next(a for a in actions if a["action_type"] == action_type)


class TestAPIService:
    """Tests for APIService."""

    def test_create_session(self, service):
        request = CreateSessionRequest(
            player_name="Test Player",
            opponents=[Difficulty.MEDIUM, Difficulty.HARD],
            random_seed=1,
        )
        response = asyncio.run(service.create_session(request))

        assert response.session_id
        assert response.status == SessionStatus.YOUR_TURN
        assert len(response.players) == 3
        assert response.players[0].name == "Test Player"
        assert response.players[0].is_current_turn
        assert [p.difficulty for p in response.players[1:]] == ["medium", "hard"]
        assert response.opponents == ["medium", "hard"]

    def test_get_nonexistent_session(self, service):
        response = service.get_session("nonexistent-id")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_submit_end_turn(self, service):
        created = asyncio.run(service.create_session(CreateSessionRequest(random_seed=2)))
        response = asyncio.run(service.submit_action(
            created.session_id, ActionRequest(action_type=ActionType.END_TURN)
        ))

        assert isinstance(response, TurnResponse)
        assert response.success
        assert response.applied_actions[0] == "You: ends turn"
        assert len(response.applied_actions) >= 2
        assert response.game_state.turn_number == 2

    def test_unknown_card(self, service):
        created = asyncio.run(service.create_session(CreateSessionRequest()))
        response = asyncio.run(service.submit_action(
            created.session_id,
            ActionRequest(action_type=ActionType.PURCHASE_CARD, card_id="L9-99"),
        ))
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_missing_noble_id(self, service):
        created = asyncio.run(service.create_session(CreateSessionRequest()))
        response = asyncio.run(service.submit_action(
            created.session_id, ActionRequest(action_type=ActionType.CLAIM_NOBLE)
        ))
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_end_session(self, service):
        created = asyncio.run(service.create_session(CreateSessionRequest()))
        assert service.end_session(created.session_id)
        assert not service.end_session(created.session_id)
        assert created.session_id not in service.list_sessions()


class TestSessionRoutes:
    """Tests for the session endpoints."""

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "gemhall"

    def test_create_and_get(self, client, session_id):
        response = client.get(f"/api/v1/sessions/{session_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == session_id
        assert data["status"] == "your_turn"
        assert len(data["players"]) == 3
        assert data["opponents"] == ["easy", "hard"]

    def test_list_sessions(self, client, session_id):
        response = client.get("/api/v1/sessions")
        assert response.json() == {"sessions": [session_id], "count": 1}

    def test_too_many_opponents(self, client):
        response = client.post(
            "/api/v1/sessions", json={"opponents": ["easy", "easy", "easy", "easy"]}
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_unknown_difficulty(self, client):
        response = client.post("/api/v1/sessions", json={"opponents": ["brutal"]})
        assert response.status_code == 422

    def test_session_not_found(self, client):
        for path in ("", "/state", "/actions"):
            response = client.get(f"/api/v1/sessions/missing{path}")
            assert response.status_code == 404
            assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_delete(self, client, session_id):
        response = client.delete(f"/api/v1/sessions/{session_id}")
        assert response.json() == {"success": True, "session_id": session_id}
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/v1/sessions/{session_id}").json()["success"] is False


class TestGameRoutes:
    """Tests for playing through the API."""

    def test_state(self, client, session_id):
        data = client.get(f"/api/v1/sessions/{session_id}/state").json()
        assert data["phase"] == "setup"
        assert data["current_player_idx"] == 0
        assert set(data["displayed"]) == {"1", "2", "3"}
        assert all(len(cards) == 4 for cards in data["displayed"].values())
        assert data["deck_sizes"] == {"1": 36, "2": 26, "3": 16}
        assert len(data["nobles"]) == 4
        assert data["pool"]["red"] == 5
        assert data["pool"]["gold"] == 5

    def test_actions(self, client, session_id):
        data = client.get(f"/api/v1/sessions/{session_id}/actions").json()
        assert data["player_idx"] == 0
        assert data["actions"][0]["action_type"] == "end_turn"
        kinds = {a["action_type"] for a in data["actions"]}
        assert {"take_gems", "reserve_card"} <= kinds

    def test_actions_for_waiting_player(self, client, session_id):
        data = client.get(f"/api/v1/sessions/{session_id}/actions?player_idx=1").json()
        assert data["actions"] == []

    def test_take_then_end_turn(self, client, session_id):
        actions = client.get(f"/api/v1/sessions/{session_id}/actions").json()["actions"]
        take = first_of_type(actions, "take_gems")

        response = client.post(f"/api/v1/sessions/{session_id}/actions", json=take)
        assert response.status_code == 200
        data = response.json()
        assert data["applied_actions"] == [f"Tester: {take['description']}"]
        assert data["game_state"]["action_taken"] is True
        assert data["game_state"]["players"][0]["gem_count"] == len(take["gems"])

        response = client.post(
            f"/api/v1/sessions/{session_id}/actions", json={"action_type": "end_turn"}
        )
        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "your_turn"
        assert data["game_state"]["turn_number"] == 3
        assert data["game_state"]["phase"] == "active"
        assert len(data["applied_actions"]) >= 3

    def test_reserve(self, client, session_id):
        actions = client.get(f"/api/v1/sessions/{session_id}/actions").json()["actions"]
        reserve = first_of_type(actions, "reserve_card")

        data = client.post(f"/api/v1/sessions/{session_id}/actions", json=reserve).json()
        player = data["game_state"]["players"][0]
        assert [c["card_id"] for c in player["reserved"]] == [reserve["card_id"]]
        assert player["gems"]["gold"] == 1

    def test_not_your_turn(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"action_type": "end_turn", "player_idx": 1},
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "NOT_YOUR_TURN"

    def test_illegal_action(self, client, session_id):
        state = client.get(f"/api/v1/sessions/{session_id}/state").json()
        card_id = state["displayed"]["3"][0]["card_id"]

        response = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"action_type": "purchase_card", "card_id": card_id},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "ILLEGAL_ACTION"

    def test_unknown_card(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"action_type": "reserve_card", "card_id": "nope"},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_malformed_body(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/actions", json={"action_type": "fly"}
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_game_finished(self, client, service, session_id):
        session = service.session_manager.get_session(session_id)
        session.game_state = session.game_state._copy_with(
            phase=GamePhase.FINISHED, winner_idx=0
        )

        state = client.get(f"/api/v1/sessions/{session_id}/state").json()
        assert state["status"] == "game_over"
        assert state["winner_name"] == "Tester"

        response = client.post(
            f"/api/v1/sessions/{session_id}/actions", json={"action_type": "end_turn"}
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "GAME_FINISHED"
