"""Anthropic Messages API client adapter."""

from typing import Any

import httpx

from app.adapters.llm.base import AbstractLLMClient

DEFAULT_BASE_URL = "https://api.anthropic.com"


class AnthropicClient(AbstractLLMClient):
    """Client for the Anthropic Messages endpoint over plain HTTP.

    Responses are returned as decoded JSON so the caller can relay them
    verbatim.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
        anthropic_version: str = "2023-06-01",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the async HTTP client.

        Args:
            api_key: Anthropic API key sent as ``x-api-key``.
            model: Model identifier (e.g. "claude-sonnet-4-20250514").
            base_url: Optional override of the API root.
            timeout_seconds: Timeout for requests in seconds.
            anthropic_version: Value of the ``anthropic-version`` header.
            transport: Optional httpx transport (used by tests).
        """
        self.model = model
        self.client = httpx.AsyncClient(
            base_url=(base_url or DEFAULT_BASE_URL).rstrip("/"),
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": anthropic_version,
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def create_message(
        self,
        message: str,
        *,
        system: str,
        max_tokens: int,
    ) -> dict[str, Any]:
        """Call ``POST /v1/messages`` with one user turn.

        Raises:
            RuntimeError: On transport failure, a non-JSON body, or a non-2xx
                status (message taken from the provider's error payload).
        """
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": message}],
        }

        try:
            response = await self.client.post("/v1/messages", json=payload)
        except httpx.HTTPError as exc:
            raise RuntimeError(f"Anthropic API error: {str(exc)}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise RuntimeError(
                f"Anthropic API returned a non-JSON body (status {response.status_code})"
            ) from exc

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            reason = error.get("message") if isinstance(error, dict) else None
            raise RuntimeError(reason or "API request failed")

        return data

    async def aclose(self) -> None:
        await self.client.aclose()
