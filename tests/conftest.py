"""Pytest configuration and fixtures shared across all test modules.

The environment is prepared here, before any test module imports
``app.core.config``, so settings never depend on a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("LLM_PROVIDER", "anthropic")
os.environ.setdefault("LLM_MODEL", "claude-sonnet-4-20250514")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.app_factory import create_app

T0 = 1_700_000_000.0


class FakeLLMClient(AbstractLLMClient):
    """Records calls and returns a canned Messages API payload."""

    def __init__(self, payload: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.payload = payload or {
            "id": "msg_test",
            "type": "message",
            "role": "assistant",
            "model": "claude-sonnet-4-20250514",
            "content": [{"type": "text", "text": "Lisa is a Solutions Architect."}],
        }
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def create_message(self, message: str, *, system: str, max_tokens: int) -> dict[str, Any]:
        self.calls.append({"message": message, "system": system, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.payload

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def llm_factory():
    """Build fake upstream clients, e.g. ``llm_factory(error=RuntimeError("x"))``."""
    return FakeLLMClient


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def clock() -> Mock:
    return Mock(return_value=T0)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(limit=10, window_seconds=3600, clock=clock)


@pytest.fixture
def client(limiter: InMemoryFixedWindowRateLimiter, fake_llm: FakeLLMClient) -> TestClient:
    """Test client over an isolated app with a fixed clock and fake upstream."""
    app = create_app(rate_limiter=limiter, llm_client=fake_llm)
    return TestClient(app)
