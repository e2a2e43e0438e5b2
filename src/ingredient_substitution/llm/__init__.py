"""LLM integration module.

Provides the chat completion client, prompt templates and the parsing
helpers that recover structured data from model output.
"""

from ingredient_substitution.llm.client import LLMClientProtocol, OpenRouterClient
from ingredient_substitution.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMError,
    LLMParseError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from ingredient_substitution.llm.models import LLMCompletionResult
from ingredient_substitution.llm.selection import ModelSelector


__all__ = [
    "LLMClientProtocol",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMEmptyResponseError",
    "LLMError",
    "LLMParseError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "LLMValidationError",
    "ModelSelector",
    "OpenRouterClient",
]
