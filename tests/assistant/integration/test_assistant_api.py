"""Integration tests for the assistant endpoints via TestClient."""

import pytest
from assistant.api.routes import router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.auth import issue_token
from shared.errors import register_exception_handlers


@pytest.fixture()
def client(memory_source):
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


class TestChatEndpoint:
    def test_product_search(self, client):
        response = client.post("/api/ai/chat", json={"message": "show me women's clothing", "history": []})
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["products"]] == [18, 15]
        assert data["structured"]["greeting"] == "Sure!"

    def test_history_supplies_the_category(self, client):
        history = [{"type": "user", "text": "rings please"}, {"type": "bot", "text": "Here are the top rated jewelery."}]
        data = client.post("/api/ai/chat", json={"message": "anything under 50?", "history": history}).json()
        assert [p["id"] for p in data["products"]] == [8]

    def test_blank_message(self, client):
        response = client.post("/api/ai/chat", json={"message": "  "})
        assert response.status_code == 400

    def test_catalogue_down(self, client, memory_source):
        memory_source.configure(available=False)
        response = client.post("/api/ai/chat", json={"message": "best electronics"})
        assert response.status_code == 503

    def test_faq_needs_no_catalogue(self, client, memory_source):
        memory_source.configure(available=False)
        response = client.post("/api/ai/chat", json={"message": "what is your return policy?"})
        assert response.status_code == 200
        assert response.json()["products"] == []


class TestSessions:
    def test_session_round_trip(self, client):
        session_id = client.post("/api/ai/sessions").json()["session_id"]

        response = client.post(f"/api/ai/sessions/{session_id}/messages", json={"message": "hello"})
        assert response.status_code == 200
        assert response.json()["structured"]["greeting"] == "Hi there!"

        session = client.get(f"/api/ai/sessions/{session_id}").json()
        assert [m["type"] for m in session["messages"]] == ["bot", "user", "bot"]
        assert session["owner_id"] is None
        assert session["cooldown_remaining"] > 0

    def test_owner_from_token(self, client):
        headers = {"Authorization": f"Bearer {issue_token('user-001', 'jane', 'user')}"}
        session_id = client.post("/api/ai/sessions", headers=headers).json()["session_id"]
        assert client.get(f"/api/ai/sessions/{session_id}").json()["owner_id"] == "user-001"

    def test_cooldown_is_429(self, client):
        session_id = client.post("/api/ai/sessions").json()["session_id"]
        client.post(f"/api/ai/sessions/{session_id}/messages", json={"message": "hello"})
        response = client.post(f"/api/ai/sessions/{session_id}/messages", json={"message": "hello?"})
        assert response.status_code == 429

    def test_unknown_session(self, client):
        assert client.get("/api/ai/sessions/missing").status_code == 404
