"""HTTP client for OpenRouter-compatible chat completion endpoints.

Each call is a single attempt. Retry policy is owned by the caller, which
knows whether a failed call is worth repeating.
"""

from __future__ import annotations

import time

import httpx
from aiolimiter import AsyncLimiter
from pydantic import ValidationError

from ingredient_substitution.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from ingredient_substitution.llm.models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    LLMCompletionResult,
)
from ingredient_substitution.observability.logging import get_logger


logger = get_logger(__name__)


class OpenRouterClient:
    """Async HTTP client for an OpenAI-compatible chat completions API.

    Attributes:
        base_url: API base URL.
        model: Default model id.
        api_key: Bearer token for authentication.
        timeout: HTTP request timeout in seconds.
    """

    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "qwen/qwen-2.5-7b-instruct",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        requests_per_minute: float = 60.0,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key sent as a bearer token.
            model: Default model id.
            base_url: API base URL.
            timeout: HTTP request timeout in seconds (default: 30).
            requests_per_minute: Pacing for outgoing requests (default: 60).

        Raises:
            LLMConfigurationError: If no API key is given.
        """
        if not api_key:
            msg = "An API key is required for the LLM endpoint"
            raise LLMConfigurationError(msg)

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client: httpx.AsyncClient | None = None
        # One request per (60/rpm) seconds, no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    async def initialize(self) -> None:
        """Initialize the HTTP client with auth headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
            ),
        )
        logger.info(
            "OpenRouterClient initialized",
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("OpenRouterClient shutdown")

    async def _post(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """Send one request and map transport failures to LLM errors."""
        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        await self._rate_limiter.acquire()

        try:
            response = await self._http_client.post(
                self.chat_url,
                json=request.model_dump(exclude_none=True),
            )

            if response.status_code == 429:
                retry_after = response.headers.get("retry-after", "60")
                msg = f"LLM rate limit exceeded, retry after {retry_after}s"
                raise LLMRateLimitError(msg)

            response.raise_for_status()
            return ChatCompletionResponse.model_validate(response.json())

        except httpx.TimeoutException as e:
            logger.warning("LLM request timeout", model=request.model, timeout=self.timeout)
            msg = f"LLM timeout after {self.timeout}s"
            raise LLMTimeoutError(msg) from e

        except httpx.HTTPStatusError as e:
            logger.warning(
                "LLM request failed",
                status_code=e.response.status_code,
                model=request.model,
            )
            msg = f"LLM endpoint returned {e.response.status_code}"
            raise LLMResponseError(msg) from e

        except httpx.RequestError as e:
            logger.warning("LLM connection error", model=request.model, error=str(e))
            msg = f"Cannot connect to LLM endpoint: {e}"
            raise LLMUnavailableError(msg) from e

        except (ValueError, ValidationError) as e:
            msg = f"LLM endpoint returned a malformed body: {e}"
            raise LLMResponseError(msg) from e

    async def complete(
        self,
        prompt: str,
        *,
        model: str | None = None,
        temperature: float = 0.0,
    ) -> LLMCompletionResult:
        """Send one user prompt and return the first choice's content.

        Args:
            prompt: User message content.
            model: Model to use (defaults to client's default model).
            temperature: Sampling temperature.

        Returns:
            LLMCompletionResult with the stripped reply text.

        Raises:
            LLMUnavailableError: If the endpoint cannot be reached.
            LLMTimeoutError: If the request times out.
            LLMRateLimitError: If the endpoint rate limits the request.
            LLMResponseError: If the endpoint returns an error.
            LLMEmptyResponseError: If the reply has no content.
        """
        use_model = model or self.model
        request = ChatCompletionRequest(
            model=use_model,
            messages=[ChatMessage(role="user", content=prompt)],
            temperature=temperature,
        )

        started = time.perf_counter()
        response = await self._post(request)
        duration_ms = (time.perf_counter() - started) * 1000

        content = response.content
        if content is None:
            msg = "LLM response contained no message content"
            raise LLMEmptyResponseError(msg)

        logger.debug(
            "LLM completion received",
            model=response.model or use_model,
            duration_ms=round(duration_ms, 1),
            chars=len(content),
        )

        return LLMCompletionResult(
            raw_response=content,
            model=response.model or use_model,
            prompt_tokens=response.usage.prompt_tokens if response.usage else None,
            completion_tokens=(
                response.usage.completion_tokens if response.usage else None
            ),
            duration_ms=duration_ms,
        )
