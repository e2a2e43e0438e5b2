"""LLM Client Protocol definition.

Defines the interface the substitution service depends on, so the HTTP
client can be swapped for another provider or a test double.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from ingredient_substitution.llm.models import LLMCompletionResult


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Protocol for LLM client implementations.

    Key methods:
    - complete: single chat completion returning the first choice's text
    - initialize/shutdown: lifecycle management for connection pools
    """

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def complete(
        self,
        prompt: str,
        *,
        model: str | None = None,
        temperature: float = 0.0,
    ) -> LLMCompletionResult:
        """Send one user prompt and return the model's reply.

        Args:
            prompt: User message content.
            model: Model override (uses client default if None).
            temperature: Sampling temperature.

        Returns:
            LLMCompletionResult with the reply text.

        Raises:
            LLMUnavailableError: Service unreachable.
            LLMTimeoutError: Request timed out.
            LLMRateLimitError: Endpoint returned 429.
            LLMResponseError: Other HTTP error from the endpoint.
            LLMEmptyResponseError: Reply had no content.
        """
        ...
