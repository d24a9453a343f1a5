"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator  # noqa: TC003

import pytest
import structlog


API_BASE_URL = "https://selectpdf.com/api2"
API_KEY = "test-key-12345"


@pytest.fixture
def api_key() -> str:
    """API key for test clients."""
    return API_KEY


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record the waits of the job poller instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr("selectpdf.api.client.time.sleep", recorded.append)
    return recorded


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by a test (e.g. by the CLI)."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _clear_api_key_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a key from the developer's environment out of the tests."""
    monkeypatch.delenv("SELECTPDF_API_KEY", raising=False)
