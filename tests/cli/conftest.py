"""Shared fixtures for CLI execution tests."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: object) -> dict[str, str]:
    """Point the CLI at a test server URL and isolate it from any local .env."""
    monkeypatch.chdir(tmp_path)  # type: ignore[arg-type]
    monkeypatch.delenv("EDISON_OUTPUT_FORMAT", raising=False)
    env = {
        "EDISON_WS_URL": "ws://edison.test:8081",
        "EDISON_REQUEST_TIMEOUT": "2",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env
