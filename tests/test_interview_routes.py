import json

import httpx
from fastapi.testclient import TestClient

from interview_app.config import DEFAULT_MODEL
from interview_app.main import app
from interview_app.models import Role
from interview_app.prompts import GREETING_MESSAGE
from conftest import groq_reply, make_orchestrator, recording

STRUCTURED = json.dumps({"text": "Welcome! What kind of interview would you like?", "facialExpression": "smile", "animation": "Talking_0"})


def test_chat_returns_presentation_reply(client_for):
    client = client_for(make_orchestrator(groq_reply(STRUCTURED)))
    response = client.post("/interview/chat", json={"message": "hello", "sessionId": "abc"})
    assert response.status_code == 200

    data = response.json()
    assert data["model"] == DEFAULT_MODEL
    assert "error" not in data
    message = data["messages"][0]
    assert message["text"] == "Welcome! What kind of interview would you like?"
    assert message["audio"] == ""
    assert message["facialExpression"] == "smile"
    assert message["animation"] == "Talking_0"
    assert len(message["lipsync"]["mouthCues"]) > 0


def test_chat_without_credential_degrades_gracefully():
    with TestClient(app) as client:
        response = client.post("/interview/chat", json={"message": "hi"})
    assert response.status_code == 200
    message = response.json()["messages"][0]
    assert message["facialExpression"] == "sad"
    assert message["animation"] == "Idle"
    assert "GROQ_API_KEY" in message["text"]


def test_provider_error_returns_500(client_for):
    def unavailable(request):
        return httpx.Response(503, text="Service Unavailable")

    client = client_for(make_orchestrator(unavailable))
    response = client.post("/interview/chat", json={"message": "hi"})
    assert response.status_code == 500
    data = response.json()
    assert data["messages"][0]["animation"] == "Idle"
    assert data["messages"][0]["facialExpression"] == "sad"
    assert "503" in data["error"]


def test_provider_unreachable_returns_500(client_for):
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = client_for(make_orchestrator(unreachable))
    response = client.post("/interview/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json()["error"]


def test_non_json_reply_is_wrapped(client_for):
    client = client_for(make_orchestrator(groq_reply("Good job!")))
    message = client.post("/interview/chat", json={"message": "my answer"}).json()["messages"][0]
    assert message["text"] == "Good job!"
    assert message["facialExpression"] == "default"
    assert message["animation"] == "Talking_1"


def test_query_model_overrides_configured_default(client_for):
    calls = []
    orchestrator = make_orchestrator(recording(groq_reply(STRUCTURED), calls), interview_model="llama-3.1-8b-instant")
    client = client_for(orchestrator)

    response = client.post("/interview/chat?model=gemma2-9b-it", json={"message": "hi"})
    assert calls[-1]["model"] == "gemma2-9b-it"
    assert response.json()["model"] == "gemma2-9b-it"

    client.post("/interview/chat", json={"message": "hi"})
    assert calls[-1]["model"] == "llama-3.1-8b-instant"


def test_request_sends_json_mode_and_limits(client_for):
    calls = []
    client = client_for(make_orchestrator(recording(groq_reply(STRUCTURED), calls)))
    client.post("/interview/chat", json={"message": "hi"})
    payload = calls[0]
    assert payload["response_format"] == {"type": "json_object"}
    assert payload["temperature"] == 0.7
    assert payload["max_tokens"] == 300
    assert payload["messages"][0]["role"] == "system"
    assert payload["messages"][-1] == {"role": "user", "content": "hi"}


def test_invalid_body_is_treated_as_empty(client_for):
    orchestrator = make_orchestrator(groq_reply(STRUCTURED))
    client = client_for(orchestrator)
    response = client.post("/interview/chat", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    transcript = orchestrator.session_store.get("default")
    assert transcript[1].content == GREETING_MESSAGE


def test_twenty_five_turns_keep_transcript_bounded(client_for):
    orchestrator = make_orchestrator(groq_reply(STRUCTURED))
    client = client_for(orchestrator)
    for i in range(25):
        assert client.post("/interview/chat", json={"message": f"answer {i}", "sessionId": "long"}).status_code == 200

    transcript = orchestrator.session_store.get("long")
    assert len(transcript) == 21
    assert transcript[0].role == Role.SYSTEM
    assert transcript[-2].content == "answer 24"
    assert transcript[-1].content == STRUCTURED


def test_reset_clears_session(client_for):
    orchestrator = make_orchestrator(groq_reply(STRUCTURED))
    client = client_for(orchestrator)
    client.post("/interview/chat", json={"message": "hi", "sessionId": "r1"})

    response = client.post("/interview/reset", json={"sessionId": "r1"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Conversation reset"}
    assert "r1" not in orchestrator.session_store


def test_reset_unknown_session_still_succeeds(client_for):
    client = client_for(make_orchestrator(groq_reply(STRUCTURED)))
    assert client.post("/interview/reset", json={"sessionId": "nobody"}).json()["success"] is True
    assert client.post("/interview/reset").json()["success"] is True


def test_models_catalog(monkeypatch):
    monkeypatch.setenv("INTERVIEW_MODEL", "mixtral-8x7b-32768")
    with TestClient(app) as client:
        data = client.get("/interview/models").json()
    assert data["current"] == "mixtral-8x7b-32768"
    ids = [model["id"] for model in data["available"]]
    assert DEFAULT_MODEL in ids
    assert set(data["available"][0]) == {"id", "name", "description", "speed"}
    assert "INTERVIEW_MODEL" in data["usage"]


def test_models_catalog_defaults_to_hardcoded_model():
    with TestClient(app) as client:
        assert client.get("/interview/models").json()["current"] == DEFAULT_MODEL


def test_health_reports_configuration(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    with TestClient(app) as client:
        data = client.get("/health").json()
    assert data == {"status": "online", "groq_configured": True, "active_sessions": 0}


def test_routes_unavailable_before_startup():
    client = TestClient(app)
    response = client.get("/interview/models")
    assert response.status_code == 503


def test_badly_typed_field_keeps_session_id(client_for):
    orchestrator = make_orchestrator(groq_reply(STRUCTURED))
    client = client_for(orchestrator)
    response = client.post("/interview/chat", json={"message": 123, "sessionId": "alice"})
    assert response.status_code == 200

    store = orchestrator.session_store
    assert "alice" in store
    assert "default" not in store
    assert store.get("alice")[1].content == GREETING_MESSAGE


def test_reset_ignores_unknown_fields(client_for):
    orchestrator = make_orchestrator(groq_reply(STRUCTURED))
    client = client_for(orchestrator)
    client.post("/interview/chat", json={"message": "hi", "sessionId": "alice"})
    client.post("/interview/chat", json={"message": "hi"})

    client.post("/interview/reset", json={"sessionId": "alice", "extra": {"nested": True}, "force": 1})
    assert "alice" not in orchestrator.session_store
    assert "default" in orchestrator.session_store
