"""Test configuration and fixtures for keepalive-prober."""

import json
import logging
from pathlib import Path
from typing import Callable

import httpx
import pytest
import structlog

from keepalive.core.config import Settings
from keepalive.core.models import Target


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any logging configuration a test (or the CLI) installed."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    package_logger = logging.getLogger("keepalive")
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)


@pytest.fixture
def settings() -> Settings:
    """Default settings for testing."""
    return Settings()


@pytest.fixture
def sample_targets() -> list[Target]:
    """A mix of unauthenticated and authenticated targets."""
    return [
        Target(name="orders", url="https://orders.example.com", endpoint="/health"),
        Target(
            name="analytics",
            url="https://analytics.example.com",
            apikey="anon-key-1234567890",
            require_apikey=True,
        ),
        Target(name="billing", url="https://billing.example.com/", endpoint="status"),
    ]


@pytest.fixture
def recorder() -> list[httpx.Request]:
    """Requests seen by the mock transport."""
    return []


@pytest.fixture
def make_transport(recorder: list[httpx.Request]) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport answering per host.

    ``responses`` maps a host to a status code or to an exception instance
    raised when that host is requested. Unknown hosts get 200.
    """
    def factory(responses: dict | None = None) -> httpx.MockTransport:
        responses = responses or {}

        def handler(request: httpx.Request) -> httpx.Response:
            recorder.append(request)
            answer = responses.get(request.url.host, 200)
            if isinstance(answer, Exception):
                raise answer
            return httpx.Response(answer)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A projects file in the file-based (unauthenticated) layout."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "projects": [
            {"name": "orders", "url": "https://orders.example.com", "endpoint": "/health"},
            {"name": "billing", "url": "https://billing.example.com", "endpoint": "/status"},
        ]
    }))
    return path
