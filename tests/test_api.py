import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeAIService
from sitesketch.config import Settings
from sitesketch.main import app
import sitesketch.routes.api as api


@pytest.fixture
def fake_service(monkeypatch):
    service = FakeAIService(["<h1>Hello</h1>", "<p>World</p>"])
    monkeypatch.setattr(api, "get_ai_service", lambda: service)
    return service


@pytest.fixture
def test_settings(monkeypatch):
    settings = Settings(
        _env_file=None,
        google_api_key="key",
        openai_api_key="",
        cerebras_api_key="",
        max_images=5,
        max_upload_bytes=1024,
    )
    monkeypatch.setattr(api, "get_settings", lambda: settings)
    return settings


@pytest.fixture
def client(fake_service, test_settings):
    return TestClient(app)


def _events(body: str):
    return [frame for frame in body.split("\n\n") if frame]


def test_generate_streams_sse(client, fake_service):
    resp = client.post("/generate", data={"prompt": "a bakery", "provider": "google", "model": "gemini-1.5-flash"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    assert resp.headers["cache-control"] == "no-cache"
    frames = _events(resp.text)
    assert [json.loads(f[len("data: "):]) for f in frames[:-1]] == [
        {"text": "<h1>Hello</h1>"},
        {"text": "<p>World</p>"},
    ]
    assert frames[-1] == "event: close"
    assert fake_service.calls[0]["prompt"] == "a bakery"


def test_generate_defaults_provider_and_model(client, fake_service, test_settings):
    client.post("/generate", data={"prompt": "x"})
    call = fake_service.calls[0]
    assert call["provider"] == test_settings.default_provider
    assert call["model"] == test_settings.provider_models[test_settings.default_provider][0]


def test_generate_forwards_images(client, fake_service):
    files = [("images", ("a.png", b"\x89PNG", "image/png")), ("images", ("b.jpg", b"jpg", "image/jpeg"))]
    resp = client.post("/generate", data={"prompt": "like this"}, files=files)
    assert resp.status_code == 200
    images = fake_service.calls[0]["images"]
    assert [(i.filename, i.mime_type, i.data) for i in images] == [
        ("a.png", "image/png", b"\x89PNG"),
        ("b.jpg", "image/jpeg", b"jpg"),
    ]


def test_modify_wraps_current_code(client, fake_service):
    resp = client.post("/modify", data={"prompt": "add a footer", "currentCode": "<p>old</p>"})
    assert resp.status_code == 200
    prompt = fake_service.calls[0]["prompt"]
    assert "add a footer" in prompt
    assert prompt.endswith("Current code:\n<p>old</p>")


def test_provider_error_in_band(monkeypatch, test_settings):
    service = FakeAIService(["<p>1</p>", "<p>2</p>", "<p>3</p>"], fail_after=2)
    monkeypatch.setattr(api, "get_ai_service", lambda: service)
    resp = TestClient(app).post("/generate", data={"prompt": "x"})
    assert resp.status_code == 200
    frames = _events(resp.text)
    assert len(frames) == 4
    assert json.loads(frames[2][len("data: "):]) == {"error": "An error occurred while generating the website"}
    assert frames[3] == "event: close"


def test_too_many_images_rejected(client, fake_service):
    files = [("images", (f"{i}.png", b"x", "image/png")) for i in range(6)]
    resp = client.post("/generate", data={"prompt": "x"}, files=files)
    assert resp.status_code == 400
    assert fake_service.calls == []


def test_oversized_images_rejected(client, fake_service):
    files = [("images", ("big.png", b"x" * 2048, "image/png"))]
    resp = client.post("/generate", data={"prompt": "x"}, files=files)
    assert resp.status_code == 413
    assert "too large" in resp.json()["detail"]
    assert fake_service.calls == []


def test_models(client):
    resp = client.get("/models")
    assert resp.status_code == 200
    assert resp.json() == {"google": ["gemini-1.5-flash"], "openai": ["gpt-4o"]}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.json()["providers"] == ["google"]


def test_root_serves_shell(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "<html" in resp.text
