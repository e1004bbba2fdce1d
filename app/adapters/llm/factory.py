"""Factory pattern for creating LLM client instances."""

from app.adapters.llm.anthropic_client import AnthropicClient
from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.openai_client import OpenAIClient
from app.core.config import settings
from app.core.errors import ValidationAppError

SUPPORTED_PROVIDERS = ("anthropic", "openai")


def create_llm_client() -> AbstractLLMClient:
    """Instantiate the chat client configured in ``settings.llm``.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If the provider is unknown or its API key is missing.
    """
    provider = settings.llm.provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not settings.llm.api_key:
        raise ValidationAppError(
            code="llm_missing_api_key",
            message=f"{provider} provider requires LLM_API_KEY environment variable",
            details={"provider": provider},
        )

    if provider == "anthropic":
        return AnthropicClient(
            api_key=settings.llm.api_key,
            model=settings.llm.model,
            base_url=settings.llm.base_url,
            timeout_seconds=settings.llm.timeout_seconds,
            anthropic_version=settings.llm.anthropic_version,
        )

    return OpenAIClient(
        api_key=settings.llm.api_key,
        model=settings.llm.model,
        base_url=settings.llm.base_url,
        timeout_seconds=settings.llm.timeout_seconds,
    )
