"""Tests for the rate limiting dependency and its HTTP behaviour."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import AppSettings
from app.core.errors import RateLimitAppError
from app.core.rate_limit import (
    UNKNOWN_IDENTIFIER,
    build_rate_limiter,
    enforce_rate_limit,
    resolve_client_identifier,
)


def _request(headers: dict[str, str], limiter=None) -> Request:
    app = FastAPI()
    app.state.rate_limiter = limiter
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/v1/chat",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "app": app,
    }
    return Request(scope)


class TestResolveClientIdentifier:
    def test_uses_forwarded_for(self) -> None:
        assert resolve_client_identifier(_request({"X-Forwarded-For": "1.2.3.4"})) == "1.2.3.4"

    def test_uses_first_forwarded_hop(self) -> None:
        request = _request({"X-Forwarded-For": " 1.2.3.4 , 10.0.0.1, 10.0.0.2"})
        assert resolve_client_identifier(request) == "1.2.3.4"

    def test_falls_back_to_client_ip_header(self) -> None:
        assert resolve_client_identifier(_request({"Client-IP": "5.6.7.8"})) == "5.6.7.8"

    def test_forwarded_for_wins_over_client_ip(self) -> None:
        request = _request({"X-Forwarded-For": "1.2.3.4", "Client-IP": "5.6.7.8"})
        assert resolve_client_identifier(request) == "1.2.3.4"

    def test_blank_forwarded_for_falls_through(self) -> None:
        request = _request({"X-Forwarded-For": " , ", "Client-IP": "5.6.7.8"})
        assert resolve_client_identifier(request) == "5.6.7.8"

    def test_unknown_when_no_headers(self) -> None:
        assert resolve_client_identifier(_request({})) == UNKNOWN_IDENTIFIER


class TestEnforceRateLimit:
    @pytest.mark.asyncio
    async def test_returns_decision_when_allowed(self) -> None:
        limiter = InMemoryFixedWindowRateLimiter(limit=2, window_seconds=60)
        request = _request({"X-Forwarded-For": "1.2.3.4"}, limiter)

        result = await enforce_rate_limit(request)

        assert result is not None
        assert result.allowed is True
        assert result.remaining == 1

    @pytest.mark.asyncio
    async def test_raises_with_headers_when_exhausted(self) -> None:
        limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60)
        request = _request({"X-Forwarded-For": "1.2.3.4"}, limiter)
        await enforce_rate_limit(request)

        with pytest.raises(RateLimitAppError) as exc_info:
            await enforce_rate_limit(request)

        exc = exc_info.value
        assert exc.code == "rate_limit_exceeded"
        assert exc.details["remaining"] == 0
        assert exc.headers is not None
        assert exc.headers["X-RateLimit-Remaining"] == "0"
        assert exc.headers["X-RateLimit-Limit"] == "1"
        assert int(exc.headers["Retry-After"]) > 0

    @pytest.mark.asyncio
    @patch("app.core.rate_limit.settings")
    async def test_headers_omitted_when_disabled(self, mock_settings) -> None:
        mock_settings.app.rate_limit_enabled = True
        mock_settings.app.rate_limit_include_headers = False
        limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60)
        request = _request({}, limiter)
        await enforce_rate_limit(request)

        with pytest.raises(RateLimitAppError) as exc_info:
            await enforce_rate_limit(request)

        assert exc_info.value.headers is None

    @pytest.mark.asyncio
    @patch("app.core.rate_limit.settings")
    async def test_skipped_when_rate_limiting_disabled(self, mock_settings) -> None:
        mock_settings.app.rate_limit_enabled = False
        limiter = InMemoryFixedWindowRateLimiter(limit=1, window_seconds=60)
        request = _request({}, limiter)

        assert await enforce_rate_limit(request) is None
        assert await enforce_rate_limit(request) is None
        assert len(limiter) == 0


def test_build_rate_limiter_uses_settings() -> None:
    limiter = build_rate_limiter(
        AppSettings(rate_limit_requests=3, rate_limit_window_seconds=120)
    )

    assert isinstance(limiter, InMemoryFixedWindowRateLimiter)
    assert limiter.limit == 3
    assert limiter.window_seconds == 120


class TestChatQuota:
    def test_eleventh_request_is_throttled(self, client: TestClient, fake_llm) -> None:
        headers = {"X-Forwarded-For": "1.2.3.4"}

        remaining = []
        for _ in range(10):
            resp = client.post("/v1/chat", json={"message": "hi"}, headers=headers)
            assert resp.status_code == 200
            remaining.append(int(resp.headers["X-RateLimit-Remaining"]))

        blocked = client.post("/v1/chat", json={"message": "hi"}, headers=headers)

        assert remaining == [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]
        assert blocked.status_code == 429
        body = blocked.json()
        assert body["error"]["code"] == "rate_limit_exceeded"
        assert body["error"]["details"]["remaining"] == 0
        assert blocked.headers["X-RateLimit-Remaining"] == "0"
        assert blocked.headers["Retry-After"] == "3600"
        assert len(fake_llm.calls) == 10

    def test_other_clients_are_unaffected(self, client: TestClient) -> None:
        for _ in range(11):
            client.post("/v1/chat", json={"message": "hi"}, headers={"X-Forwarded-For": "1.2.3.4"})

        resp = client.post("/v1/chat", json={"message": "hi"}, headers={"X-Forwarded-For": "5.6.7.8"})

        assert resp.status_code == 200
        assert resp.headers["X-RateLimit-Remaining"] == "9"

    def test_quota_returns_after_window(self, client: TestClient, clock) -> None:
        headers = {"X-Forwarded-For": "1.2.3.4"}
        for _ in range(11):
            client.post("/v1/chat", json={"message": "hi"}, headers=headers)

        clock.return_value += 3601
        resp = client.post("/v1/chat", json={"message": "hi"}, headers=headers)

        assert resp.status_code == 200
        assert resp.headers["X-RateLimit-Remaining"] == "9"

    def test_invalid_message_still_consumes_quota(self, client: TestClient) -> None:
        headers = {"X-Forwarded-For": "1.2.3.4"}

        bad = client.post("/v1/chat", json={"message": 42}, headers=headers)
        good = client.post("/v1/chat", json={"message": "hi"}, headers=headers)

        assert bad.status_code == 400
        assert good.headers["X-RateLimit-Remaining"] == "8"

    def test_health_is_not_rate_limited(self, client: TestClient) -> None:
        for _ in range(15):
            assert client.get("/health", headers={"X-Forwarded-For": "1.2.3.4"}).status_code == 200
