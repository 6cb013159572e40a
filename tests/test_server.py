"""Tests for server startup wiring."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from headless_proxy.config import ServerConfig
from headless_proxy.exceptions import ConfigurationError
from headless_proxy.server import build_app, run_server


class TestBuildApp:
    """Tests for build_app."""

    def test_loads_projects_from_config(self, projects_file: Path) -> None:
        app = build_app(ServerConfig(projects_path=str(projects_file)))

        response = TestClient(app).get("/api/health")

        assert response.json()["projects"] == 2

    def test_missing_project_list_fails(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            build_app(ServerConfig(projects_path=str(tmp_path / "absent.json")))


class TestRunServer:
    """Tests for run_server."""

    def test_runs_uvicorn_with_configured_address(self, projects_file: Path, tmp_path: Path) -> None:
        config = ServerConfig(projects_path=str(projects_file), port=9123, log_dir=str(tmp_path / "logs"))

        with (
            patch("headless_proxy.server.configure_logging") as mock_logging,
            patch("headless_proxy.server.uvicorn.run") as mock_run,
        ):
            run_server(config)

        mock_logging.assert_called_once_with("INFO", tmp_path / "logs" / "system.jsonl")
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9123
        assert kwargs["log_config"] is None

    def test_bad_project_list_stops_before_serving(self, tmp_path: Path) -> None:
        bad = tmp_path / "projects.json"
        bad.write_text("{not a list")

        with (
            patch("headless_proxy.server.configure_logging"),
            patch("headless_proxy.server.uvicorn.run") as mock_run,
        ):
            with pytest.raises(ConfigurationError):
                run_server(ServerConfig(projects_path=str(bad)))

        mock_run.assert_not_called()
