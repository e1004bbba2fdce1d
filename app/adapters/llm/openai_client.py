"""OpenAI LLM client adapter."""

from typing import Any

from openai import AsyncOpenAI

from app.adapters.llm.base import AbstractLLMClient


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    async def create_message(
        self,
        message: str,
        *,
        system: str,
        max_tokens: int,
    ) -> dict[str, Any]:
        """Send the persona prompt and user message as a chat completion.

        Returns:
            dict[str, Any]: The completion object serialized to a dict.

        Raises:
            RuntimeError: If the API call fails or the completion has no content.
        """
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": message},
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            raise RuntimeError(f"OpenAI API error: {str(exc)}") from exc

        if not response.choices or response.choices[0].message.content is None:
            raise RuntimeError("LLM returned empty response")

        return response.model_dump()

    async def aclose(self) -> None:
        await self.client.close()
