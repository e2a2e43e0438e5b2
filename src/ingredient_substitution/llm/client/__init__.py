"""LLM client implementations."""

from ingredient_substitution.llm.client.openrouter import OpenRouterClient
from ingredient_substitution.llm.client.protocol import LLMClientProtocol


__all__ = [
    "LLMClientProtocol",
    "OpenRouterClient",
]
