"""Tests for the HTTP routes, with the orchestrator backend faked out."""

import pytest
from fastapi.testclient import TestClient

from app.api.routes import get_orchestrator
from app.core.config import settings
from app.services.errors import GenerationError
from app.services.orchestrator import Orchestrator
from main import app
from tests.fakes import ScriptedBackend


@pytest.fixture
def backend():
    return ScriptedBackend({"model-a": "first reply", "model-b": "unused"})


@pytest.fixture
def client(tmp_path, monkeypatch, backend):
    # startup hook creates the tables
    monkeypatch.setattr(settings, "DATABASE_PATH", str(tmp_path / "routes.db"))
    app.dependency_overrides[get_orchestrator] = lambda: Orchestrator(backend, ["model-a", "model-b"])
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/api/health").json() == {"status": "operational", "system": "Synapse"}


def test_chat_creates_thread_and_stores_both_messages(client, backend):
    response = client.post("/api/chat", json={"thread_id": "t1", "message": "hello?"})

    assert response.status_code == 200
    assert response.json() == {"reply": "first reply"}
    assert backend.calls == [("model-a", [], "hello?")]

    threads = client.get("/api/thread").json()
    assert [(t["thread_id"], t["title"]) for t in threads] == [("t1", "hello?")]

    messages = client.get("/api/thread/t1").json()
    assert [(m["role"], m["content"]) for m in messages] == [
        ("user", "hello?"),
        ("assistant", "first reply"),
    ]


def test_chat_sends_stored_history(client, backend):
    client.post("/api/chat", json={"thread_id": "t1", "message": "hello?"})
    client.post("/api/chat", json={"thread_id": "t1", "message": "and then?"})

    _, turns, prompt = backend.calls[-1]
    assert [(t.role, t.content) for t in turns] == [("user", "hello?"), ("model", "first reply")]
    assert prompt == "and then?"


def test_chat_rejects_empty_message(client, backend):
    response = client.post("/api/chat", json={"thread_id": "t1", "message": ""})

    assert response.status_code == 422
    assert backend.calls == []


def test_chat_rate_limited_everywhere_is_503(client, backend):
    backend.outcomes.update({
        "model-a": GenerationError("HTTP 429 from Google: busy", status_code=429),
        "model-b": GenerationError("HTTP 429 from Google: still busy", status_code=429),
    })

    response = client.post("/api/chat", json={"thread_id": "t1", "message": "hi"})

    assert response.status_code == 503
    assert "still busy" in response.json()["detail"]


def test_chat_non_recoverable_is_502(client, backend):
    backend.outcomes["model-a"] = GenerationError("HTTP 401 from Google: bad key", status_code=401)

    response = client.post("/api/chat", json={"thread_id": "t1", "message": "hi"})

    assert response.status_code == 502
    assert response.json()["detail"] == "HTTP 401 from Google: bad key"
    assert backend.models_called == ["model-a"]


def test_unknown_thread_is_404(client):
    assert client.get("/api/thread/missing").status_code == 404
    assert client.delete("/api/thread/missing").status_code == 404


def test_delete_thread(client):
    client.post("/api/chat", json={"thread_id": "t1", "message": "hi"})

    response = client.delete("/api/thread/t1")

    assert response.json() == {"success": "Thread deleted successfully"}
    assert client.get("/api/thread").json() == []


def test_respond_is_stateless(client, backend):
    payload = {"messages": [
        {"role": "assistant", "content": "old"},
        {"role": "user", "content": "new question"},
    ]}

    response = client.post("/api/respond", json=payload)

    assert response.json() == {"reply": "first reply"}
    assert backend.calls == [("model-a", [], "new question")]
    assert client.get("/api/thread").json() == []


def test_respond_trailing_assistant_is_422(client, backend):
    payload = {"messages": [{"role": "user", "content": "q"}, {"role": "assistant", "content": "a"}]}

    response = client.post("/api/respond", json=payload)

    assert response.status_code == 422
    assert backend.calls == []
