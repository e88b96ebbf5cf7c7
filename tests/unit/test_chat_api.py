"""Chat endpoint tests."""

from fastapi.testclient import TestClient

from src.config import Settings
from src.core.exceptions import ErrorKind, ResponseSourceError
from src.features.chat.fallback import FALLBACK_RESPONSES
from src.main import create_app


def test_fallback_chat_and_history(client):
    response = client.post("/api/chat", json={"message": "hello", "sessionId": "s1"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["isAI"] is False
    assert data["source"] == "fallback"
    assert data["sessionId"] == "s1"
    assert data["response"] in FALLBACK_RESPONSES

    history = client.get("/api/chat/history/s1").json()
    assert history["success"] is True
    assert history["sessionId"] == "s1"
    assert [(m["role"], m["content"]) for m in history["messages"]] == [
        ("user", "hello"),
        ("assistant", data["response"]),
    ]
    assert "createdAt" in history
    assert "lastActivity" in history


def test_blank_message_is_rejected(client):
    response = client.post("/api/chat", json={"message": "   ", "sessionId": "s1"})
    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}

    history = client.get("/api/chat/history/s1").json()
    assert history["messages"] == []


def test_missing_message_is_rejected(client):
    response = client.post("/api/chat", json={"sessionId": "s1"})
    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}


def test_unknown_session_history_is_empty(client):
    response = client.get("/api/chat/history/unknown-session")
    assert response.status_code == 200
    assert response.json() == {"success": True, "messages": [], "sessionId": "unknown-session"}


def test_ai_chat_response(ai_client, fake_source):
    fake_source.reply = "Happy to help!"

    response = ai_client.post(
        "/api/chat",
        json={"message": "hi", "sessionId": "s1", "context": "Docs page"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["response"] == "Happy to help!"
    assert data["isAI"] is True
    assert data["source"] == "ai"
    assert "timestamp" in data
    assert "Docs page" in fake_source.prompts[0]


def test_quota_error_returns_429_and_keeps_user_message(ai_client, fake_source):
    fake_source.error = RuntimeError("quota exceeded")

    response = ai_client.post("/api/chat", json={"message": "hello", "sessionId": "s1"})
    assert response.status_code == 429
    assert response.json() == {"error": "AI service is temporarily busy. Please try again in a moment."}

    messages = ai_client.get("/api/chat/history/s1").json()["messages"]
    assert [(m["role"], m["content"]) for m in messages] == [("user", "hello")]


def test_auth_error_returns_500(ai_client, fake_source):
    fake_source.error = ResponseSourceError("bad key", ErrorKind.AUTH)

    response = ai_client.post("/api/chat", json={"message": "hello", "sessionId": "s1"})
    assert response.status_code == 500
    assert response.json() == {"error": "AI service authentication failed. Please contact support."}


def test_unknown_error_returns_fallback_text(ai_client, fake_source):
    fake_source.error = RuntimeError("socket closed: secret upstream detail")

    response = ai_client.post("/api/chat", json={"message": "hello", "sessionId": "s1"})
    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Sorry, I encountered an issue. Please try again."
    assert data["fallback"] in FALLBACK_RESPONSES
    assert "secret" not in response.text


def test_rate_limit_rejects_after_max_requests():
    app = create_app(settings=Settings(gemini_api_key="", rate_limit_max_requests=2))
    client = TestClient(app)

    for _ in range(2):
        assert client.post("/api/chat", json={"message": "hi", "sessionId": "s1"}).status_code == 200

    response = client.post("/api/chat", json={"message": "hi", "sessionId": "s1"})
    assert response.status_code == 429
    data = response.json()
    assert data["error"] == "Too many requests. Please try again later."
    assert 0 < data["retryAfter"] <= 900
    assert response.headers["Retry-After"] == str(data["retryAfter"])


def test_history_is_not_rate_limited():
    app = create_app(settings=Settings(gemini_api_key="", rate_limit_max_requests=1))
    client = TestClient(app)

    for _ in range(3):
        assert client.get("/api/chat/history/s1").status_code == 200


def test_apps_do_not_share_state():
    first = TestClient(create_app(settings=Settings(gemini_api_key="")))
    second = TestClient(create_app(settings=Settings(gemini_api_key="")))

    first.post("/api/chat", json={"message": "hello", "sessionId": "s1"})

    assert second.get("/api/chat/history/s1").json()["messages"] == []


def test_non_string_message_is_rejected(client):
    response = client.post("/api/chat", json={"message": 5, "sessionId": "s1"})
    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}


def test_malformed_json_body_is_rejected(client):
    response = client.post(
        "/api/chat",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}
    assert "not json" not in response.text
