from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for upstream chat providers."""

	@abstractmethod
	async def create_message(
		self,
		message: str,
		*,
		system: str,
		max_tokens: int,
	) -> dict[str, Any]:
		"""Send a single user message and return the provider's response.

		Args:
			message: User message content.
			system: System prompt applied to the conversation.
			max_tokens: Upper bound on generated tokens.

		Returns:
			dict[str, Any]: The provider's JSON response body, unmodified.

		Raises:
			RuntimeError: If the provider call fails or returns an error payload.
		"""
		...

	async def aclose(self) -> None:
		"""Release network resources held by the client."""
		return None
