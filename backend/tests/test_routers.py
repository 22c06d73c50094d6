import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from roampedia.database import get_db
from roampedia.dependencies import get_current_user, get_optional_user
from roampedia.models.user import User
from roampedia.routers import admin, chatbot, recommendations, tasks
from roampedia.services.chatbot_service import chatbot_service
from roampedia.services.recommendation.engine import EMPTY_REQUEST_ERROR


async def _no_db():
    yield None


@pytest.fixture
def member():
    return User(id=uuid.uuid4(), email="traveler@example.com", password_hash="x", role="user", is_active=True)


@pytest.fixture
def client(member):
    app = FastAPI()
    app.include_router(chatbot.router, prefix="/api/chatbot")
    app.include_router(recommendations.router, prefix="/api/recommendations")
    app.include_router(tasks.router, prefix="/api/tasks")
    app.include_router(admin.router, prefix="/api/admin")
    app.dependency_overrides[get_db] = _no_db
    app.dependency_overrides[get_current_user] = lambda: member
    app.dependency_overrides[get_optional_user] = lambda: None
    return TestClient(app)


def test_chatbot_rejects_blank_message(client):
    response = client.post("/api/chatbot", json={"message": "   "})
    assert response.status_code == 400
    assert response.json() == {"response": "Please send a non-empty 'message' field."}


def test_chatbot_replies(client, monkeypatch):
    async def fake_handle(text):
        return f"echo: {text}"

    monkeypatch.setattr(chatbot_service, "handle_message", fake_handle)
    response = client.post("/api/chatbot", json={"message": "hi"})
    assert response.status_code == 200
    assert response.json() == {"response": "echo: hi"}


def test_chatbot_failure_is_500(client, monkeypatch):
    async def broken(text):
        raise RuntimeError("upstream exploded")

    monkeypatch.setattr(chatbot_service, "handle_message", broken)
    response = client.post("/api/chatbot", json={"message": "hi"})
    assert response.status_code == 500
    assert "something went wrong" in response.json()["response"]


def test_recommendations_need_a_vibe_or_activity(client):
    response = client.post("/api/recommendations", json={"vibes": [], "activities": [""]})
    assert response.status_code == 400
    assert response.json()["detail"] == EMPTY_REQUEST_ERROR


def test_task_without_fields_is_400(client):
    response = client.post("/api/tasks", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing fields"


def test_task_with_blank_text_is_400(client):
    response = client.post("/api/tasks", json={"itinerary_id": str(uuid.uuid4()), "text": "  "})
    assert response.status_code == 400


def test_admin_routes_refuse_regular_users(client):
    response = client.get("/api/admin/system-stats")
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"
