"""
Shared fixtures and utilities for iTunes service tests.

Responses in fixtures/ mirror real payloads from the iTunes search/lookup
API and the Apple charts feed.
"""

import json
from pathlib import Path
from typing import Any

import pytest

from api.itunes.config import ITunesConfig
from api.itunes.core import ITunesPodcastService
from utils.get_logger import get_null_logger

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ENV_KEYS = (
    "ITUNES_API_URL",
    "ITUNES_TRENDING_HOST",
    "ITUNES_TIMEOUT_SECONDS",
    "ITUNES_LOGGING",
    "ITUNES_LOG_LEVEL",
)


def load_fixture(filename: str) -> Any:
    """Load a fixture from JSON file.

    Raises:
        FileNotFoundError: If fixture file doesn't exist
    """
    fixture_path = FIXTURES_DIR / filename
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path) as f:
        return json.load(f)


def as_body(payload: Any) -> bytes:
    return json.dumps(payload).encode("utf-8")


class FakeTransport:
    """Transport double that replays queued responses and records every URL."""

    def __init__(self, *responses: tuple[bytes, int] | BaseException):
        self.responses = list(responses)
        self.urls: list[str] = []

    def queue(self, payload: Any, status: int = 200) -> "FakeTransport":
        body = payload if isinstance(payload, bytes) else as_body(payload)
        self.responses.append((body, status))
        return self

    def queue_error(self, error: BaseException) -> "FakeTransport":
        self.responses.append(error)
        return self

    @property
    def call_count(self) -> int:
        return len(self.urls)

    async def fetch(self, url: str) -> tuple[bytes, int]:
        self.urls.append(url)
        if not self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def clean_env(monkeypatch):
    """Remove iTunes settings from the environment."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def itunes_test_config(clean_env):
    """Configuration with default endpoints."""
    return ITunesConfig()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def service(fake_transport, itunes_test_config):
    """Service wired to the fake transport with logging discarded."""
    return ITunesPodcastService(
        transport=fake_transport,
        logger=get_null_logger("itunes-tests"),
        config=itunes_test_config,
    )


@pytest.fixture
def search_payload():
    return load_fixture("search_podcasts.json")


@pytest.fixture
def lookup_payload():
    return load_fixture("lookup_podcasts.json")


@pytest.fixture
def trending_payload():
    return load_fixture("trending_us.json")
