"""Tests for the FastAPI application factory."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from debridarr.infrastructure.config import AppConfig
from debridarr.interfaces.app import _redact_path, create_app


class TestHealthz:
    def test_ok_before_startup(self) -> None:
        client = TestClient(create_app(AppConfig()))

        resp = client.get("/healthz")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "sources": []}

    def test_lists_enabled_sources(self) -> None:
        app = create_app(AppConfig())
        rutor = MagicMock(enabled=True)
        rutor.name = "rutor"
        kinozal = MagicMock(enabled=False)
        kinozal.name = "kinozal"
        app.state.sources = [rutor, kinozal]
        client = TestClient(app)

        assert client.get("/healthz").json()["sources"] == ["rutor"]

    def test_manifest_routed(self) -> None:
        client = TestClient(create_app(AppConfig()))
        assert client.get("/manifest.json").status_code == 200


class TestRedactPath:
    def test_config_segment_hidden(self) -> None:
        assert (
            _redact_path("/SECRETKEY123/stream/movie/tt1.json")
            == "/<config>/stream/movie/tt1.json"
        )

    def test_unconfigured_paths_untouched(self) -> None:
        assert _redact_path("/stream/movie/tt1.json") == "/stream/movie/tt1.json"
        assert _redact_path("/manifest.json") == "/manifest.json"
        assert _redact_path("/healthz") == "/healthz"
