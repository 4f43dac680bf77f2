import json
from typing import Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from interview_app.config import Settings
from interview_app.interview_service import InterviewOrchestrator
from interview_app.main import app
from interview_app.services import get_orchestrator
from interview_app.session_store import SessionStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # Keep tests independent of a developer's .env and off the log directory
    for name in ("GROQ_API_KEY", "INTERVIEW_MODEL", "GROQ_API_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_DIR", "")


def groq_reply(content: str, model: Optional[str] = None) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every completion with `content`, echoing the requested model."""
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        return httpx.Response(200, json={
            "choices": [{"message": {"role": "assistant", "content": content}}],
            "model": model or payload["model"],
        })
    return handler


def recording(handler, calls: List[dict]):
    def wrapper(request: httpx.Request):
        calls.append(json.loads(request.content))
        return handler(request)
    return wrapper


def make_orchestrator(handler=None, api_key: str = "test-key", **settings) -> InterviewOrchestrator:
    transport = httpx.MockTransport(handler) if handler is not None else None
    config = Settings(groq_api_key=api_key, **settings)
    store = SessionStore(history_turns=config.max_history_turns)
    return InterviewOrchestrator(store, config, transport=transport)


@pytest.fixture
def client_for():
    """Build a TestClient whose interview routes use the given orchestrator."""
    clients = []

    def build(orchestrator: InterviewOrchestrator) -> TestClient:
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield build

    for client in clients:
        client.__exit__(None, None, None)
    app.dependency_overrides.clear()
