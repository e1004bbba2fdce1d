"""LLM adapter layer - abstracts over upstream chat providers."""

from app.adapters.llm.anthropic_client import AnthropicClient
from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import create_llm_client
from app.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "AnthropicClient",
    "OpenAIClient",
    "create_llm_client",
]
