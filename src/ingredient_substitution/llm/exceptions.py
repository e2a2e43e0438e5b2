"""LLM client exceptions.

Transport failures and malformed model output are separate branches of the
hierarchy so logs can tell them apart, even though the generation path
retries both.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMUnavailableError(LLMError):
    """Raised when the LLM service cannot be reached.

    This includes connection errors and service unavailability.
    """


class LLMTimeoutError(LLMUnavailableError):
    """Raised when an LLM request times out."""


class LLMResponseError(LLMError):
    """Raised when the LLM endpoint returns an HTTP error status."""


class LLMRateLimitError(LLMError):
    """Raised when the LLM endpoint rate limits the request."""


class LLMEmptyResponseError(LLMError):
    """Raised when the response carries no message content."""


class LLMValidationError(LLMError):
    """Raised when the response content does not have the expected shape."""


class LLMParseError(LLMValidationError):
    """Raised when no JSON object can be recovered from the response text."""


class LLMConfigurationError(LLMError):
    """Raised when the LLM client is misconfigured."""
