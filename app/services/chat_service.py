"""Chat service forwarding visitor messages to the upstream model.

Validates the message, attaches the persona system prompt and relays the
provider's response unchanged. Upstream failures are reported once and never
retried on the caller's behalf.
"""

import logging
from typing import Any

from app.adapters.llm.base import AbstractLLMClient
from app.core.config import settings
from app.core.errors import LLMAppError, ValidationAppError

logger = logging.getLogger(__name__)


class ChatService:
    """Proxy between the chat endpoint and an LLM client.

    Attributes:
        llm: Upstream chat client.
        system_prompt: Persona prompt sent with every message.
        max_tokens: Generation cap forwarded to the provider.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        system_prompt: str,
        *,
        max_tokens: int | None = None,
        max_message_chars: int | None = None,
    ) -> None:
        self.llm = llm
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens or settings.llm.max_tokens
        self.max_message_chars = max_message_chars or settings.app.max_message_chars

    def _validate_message(self, message: str) -> None:
        """Reject blank or oversized messages.

        Raises:
            ValidationAppError: If the message is empty or too long.
        """
        if not message or not message.strip():
            raise ValidationAppError(
                code="invalid_message_format",
                message="Invalid message format",
                details={"hint": "message must be a non-empty string"},
            )

        if len(message) > self.max_message_chars:
            raise ValidationAppError(
                code="message_too_long",
                message=f"Message exceeds {self.max_message_chars} characters.",
                details={
                    "max_value": self.max_message_chars,
                    "actual_value": len(message),
                },
            )

    async def reply(self, message: str) -> dict[str, Any]:
        """Send ``message`` upstream and return the provider payload.

        Args:
            message: Visitor's chat message.

        Returns:
            The provider's JSON response body.

        Raises:
            ValidationAppError: If the message is invalid.
            LLMAppError: If the upstream call fails.
        """
        self._validate_message(message)

        try:
            payload = await self.llm.create_message(
                message,
                system=self.system_prompt,
                max_tokens=self.max_tokens,
            )
        except RuntimeError as exc:
            logger.error(
                "chat.upstream_failed",
                extra={
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                    "message_chars": len(message),
                },
            )
            raise LLMAppError(
                code="upstream_request_failed",
                message="Failed to process request. Please try again.",
                details={"reason": str(exc)},
            ) from exc

        logger.info(
            "chat.completed",
            extra={
                "message_chars": len(message),
                "model": payload.get("model"),
            },
        )
        return payload
