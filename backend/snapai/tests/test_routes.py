"""Tests covering the FastAPI routes defined in :mod:`snapai.api.routes`."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from snapai.clients.dalle import DalleClient
from snapai.core.errors import DownloadFailedError, GenerationFailedError
from snapai.core.session import InteractionController
from snapai.main import app


@pytest.fixture
def dalle():
    client = MagicMock()
    client.model = "dall-e-3"
    client.generate = AsyncMock(return_value="https://img/1.png")
    return client


@pytest.fixture
def fetcher():
    return AsyncMock(return_value=(b"png-bytes", "image/png"))


@pytest.fixture
def api(dalle, fetcher):
    with TestClient(app) as client:
        app.state.controller = InteractionController(client=dalle, fetcher=fetcher)
        yield client


def _fill_session(api, prompt="a red apple on a table", credential="sk-test"):
    assert api.put("/api/session/prompt", json={"prompt": prompt}).status_code == 200
    assert api.put("/api/session/credential", json={"credential": credential}).status_code == 200


def test_root_and_health(api):
    assert api.get("/").json()["health"] == "/api/healthz"

    r = api.get("/api/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "model": "dall-e-3", "generating": False}
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


def test_session_starts_empty(api):
    body = api.get("/api/session").json()
    assert body == {
        "prompt": "",
        "has_credential": False,
        "is_generating": False,
        "can_generate": False,
        "images": [],
        "notifications": [],
    }


def test_credential_is_not_echoed(api):
    r = api.put("/api/session/credential", json={"credential": "sk-secret"})
    assert r.json()["has_credential"] is True
    assert "sk-secret" not in r.text


def test_generate_success(api, dalle):
    _fill_session(api)

    r = api.post("/api/generate")

    assert r.status_code == 200
    body = r.json()
    assert body["image"]["url"] == "https://img/1.png"
    assert body["image"]["prompt"] == "a red apple on a table"
    assert body["notification"]["level"] == "success"

    session = api.get("/api/session").json()
    assert session["prompt"] == ""
    assert [(i["url"], i["prompt"]) for i in session["images"]] == [
        ("https://img/1.png", "a red apple on a table")
    ]
    assert session["notifications"][-1]["message"] == "Image generated successfully!"
    dalle.generate.assert_awaited_once_with("a red apple on a table", "sk-test")


def test_generate_rejects_missing_credential(api, dalle):
    api.put("/api/session/prompt", json={"prompt": "a cat"})

    r = api.post("/api/generate")

    assert r.status_code == 400
    assert "API key" in r.json()["detail"]
    assert dalle.generate.await_count == 0


def test_generate_failure_maps_to_bad_gateway(api, dalle):
    dalle.generate = AsyncMock(side_effect=GenerationFailedError("invalid key", status_code=401))
    _fill_session(api)

    r = api.post("/api/generate")

    assert r.status_code == 502
    assert "invalid key" not in r.json()["detail"]
    session = api.get("/api/session").json()
    assert session["images"] == []
    assert session["prompt"] == "a red apple on a table"
    assert session["notifications"][-1]["kind"] == "request_failure"


def test_generate_while_busy_conflicts(api, dalle):
    _fill_session(api)
    app.state.controller.session.is_generating = True

    r = api.post("/api/generate")

    assert r.status_code == 409
    assert dalle.generate.await_count == 0


def test_prompt_edit_refused_while_generating(api):
    app.state.controller.session.is_generating = True

    r = api.put("/api/session/prompt", json={"prompt": "new"})

    assert r.status_code == 409


def test_download_returns_attachment(api, fetcher):
    _fill_session(api, prompt="A cat! @ the/beach")
    api.post("/api/generate")

    r = api.get("/api/images/0/download")

    assert r.status_code == 200
    assert r.content == b"png-bytes"
    assert r.headers["content-type"] == "image/png"
    assert r.headers["content-disposition"] == 'attachment; filename="snapai-A-cat----the-beach.png"'
    fetcher.assert_awaited_once_with("https://img/1.png")


def test_download_unknown_index(api):
    r = api.get("/api/images/5/download")
    assert r.status_code == 404


def test_download_failure(api, fetcher):
    _fill_session(api)
    api.post("/api/generate")
    fetcher.side_effect = DownloadFailedError("timed out")

    r = api.get("/api/images/0/download")

    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to download image"


def test_generate_with_non_ascii_key_is_bad_gateway(api):
    app.state.controller = InteractionController(client=DalleClient(), fetcher=AsyncMock())
    _fill_session(api, credential="sk-clé")

    with patch("httpx.AsyncClient") as mock_client_cls:
        r = api.post("/api/generate")

    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to generate image. Please check your API key and try again."
    session = api.get("/api/session").json()
    assert session["images"] == []
    assert session["prompt"] == "a red apple on a table"
    assert session["notifications"][-1]["level"] == "error"
    mock_client_cls.assert_not_called()
