"""
Tests for the FastAPI application.

Drives the HTTP and WebSocket endpoints through the test client with
inline turn resolution and a manual clock.
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.service import APIService
from ..engine_core import IMMEDIATE
from ..session import SessionManager
from .helpers import unmatched_pairs


@pytest.fixture
def service():
    return APIService(session_manager=SessionManager(delays=IMMEDIATE))


@pytest.fixture
def client(service):
    with TestClient(create_app(service=service)) as client:
        yield client


@pytest.fixture
def session_id(client):
    response = client.post("/api/v1/sessions", json={"difficulty": "easy", "seed": 12})
    assert response.status_code == 200
    return response.json()["session_id"]


class TestSystemEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        data = client.get("/").json()
        assert data["name"] == "Concental API"
        assert data["docs"] == "/api/docs"

    def test_difficulties(self, client):
        data = client.get("/api/v1/difficulties").json()
        assert [d["name"] for d in data["difficulties"]] == ["easy", "medium", "hard"]
        assert data["difficulties"][1]["max_moves"] == 30


class TestSessionEndpoints:

    def test_create_default_session(self, client):
        """An empty body deals an easy game."""
        response = client.post("/api/v1/sessions")

        assert response.status_code == 200
        data = response.json()
        assert data["difficulty"] == "easy"
        assert data["status"] == "not_started"
        assert len(data["cards"]) == 16

    def test_create_invalid_difficulty(self, client):
        response = client.post("/api/v1/sessions", json={"difficulty": "ultra"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_DIFFICULTY"

    def test_get_unknown_session(self, client):
        response = client.get("/api/v1/sessions/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_list_and_delete(self, client, session_id):
        listed = client.get("/api/v1/sessions").json()
        assert session_id in listed["sessions"]
        assert listed["count"] == 1

        deleted = client.delete(f"/api/v1/sessions/{session_id}").json()
        assert deleted == {"success": True, "session_id": session_id}
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404

    def test_restart(self, client, session_id):
        client.post(f"/api/v1/sessions/{session_id}/cards/0")
        response = client.post(
            f"/api/v1/sessions/{session_id}/restart", json={"difficulty": "hard"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["difficulty"] == "hard"
        assert data["status"] == "not_started"
        assert len(data["cards"]) == 30


class TestGameLoopEndpoints:

    def test_select_card(self, client, session_id):
        data = client.post(f"/api/v1/sessions/{session_id}/cards/4").json()

        assert data["status"] == "running"
        assert data["cards"][4]["state"] == "flipped"
        assert data["cards"][4]["symbol"] is not None
        assert data["cards"][5]["symbol"] is None

    def test_out_of_range_card_is_unchanged(self, client, session_id):
        before = client.get(f"/api/v1/sessions/{session_id}").json()
        after = client.post(f"/api/v1/sessions/{session_id}/cards/99").json()
        assert after == before

    def test_hint(self, client, session_id):
        client.post(f"/api/v1/sessions/{session_id}/cards/0")
        data = client.post(f"/api/v1/sessions/{session_id}/hint").json()

        assert data["hints_remaining"] == 1
        assert sum(card["hinted"] for card in data["cards"]) == 1

    def test_result_conflict_while_playing(self, client, session_id):
        response = client.get(f"/api/v1/sessions/{session_id}/result")

        assert response.status_code == 409
        assert response.json()["error_code"] == "GAME_NOT_FINISHED"

    def test_play_to_win(self, client, service, session_id):
        """Clearing the board over HTTP yields a scored result."""
        game = service.get_session(session_id).game
        for first, second in unmatched_pairs(game):
            client.post(f"/api/v1/sessions/{session_id}/cards/{first}")
            state = client.post(f"/api/v1/sessions/{session_id}/cards/{second}").json()

        assert state["status"] == "won"
        assert state["result"]["won"] is True

        result = client.get(f"/api/v1/sessions/{session_id}/result").json()
        assert result["score"] == 1270
        assert result["rating"]["stars"] == 4
        assert result["headline"] == "Victory!"


class TestWebSocket:

    def test_ping_and_select(self, client, session_id):
        """The socket pushes the initial state and every change after it."""
        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            initial = ws.receive_json()
            assert initial["type"] == "snapshot"
            assert initial["payload"]["session_id"] == session_id

            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

            ws.send_json({"type": "select", "index": 3})
            update = ws.receive_json()
            assert update["type"] == "snapshot"
            assert update["payload"]["cards"][3]["state"] == "flipped"

    def test_invalid_json(self, client, session_id):
        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            ws.receive_json()
            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

    @pytest.mark.parametrize("raw", ["[1, 2]", "5", '"select"', "null"])
    def test_non_object_json(self, client, session_id, raw):
        """Well-formed JSON that is not an object is rejected, and the socket stays open."""
        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            ws.receive_json()
            ws.send_text(raw)
            assert ws.receive_json()["type"] == "error"

            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

    def test_messages_keep_session_alive(self, client, service, session_id):
        """Socket-only play refreshes the session so cleanup leaves it alone."""
        session = service.session_manager._sessions[session_id]

        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            ws.receive_json()
            session.last_active = 0.0
            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

        assert session.last_active > 0.0
        assert service.session_manager.cleanup_stale_sessions(3600) == 0
        assert service.session_manager.get_session(session_id) is session

    def test_unknown_session(self, client):
        with client.websocket_connect("/api/v1/sessions/missing/ws") as ws:
            message = ws.receive_json()
            assert message["type"] == "error"
            assert message["payload"]["error_code"] == "SESSION_NOT_FOUND"
