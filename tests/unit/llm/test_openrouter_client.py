"""Unit tests for OpenRouterClient.

Tests cover:
- Client lifecycle
- HTTP request construction
- Response parsing
- Error mapping
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest
import respx

from ingredient_substitution.llm.client import LLMClientProtocol, OpenRouterClient
from ingredient_substitution.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from tests.fixtures.llm_responses import MILK_SUBSTITUTES_CONTENT, create_chat_response


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


pytestmark = pytest.mark.unit

# High rate limit to disable rate limiting delays in tests
TEST_RATE_LIMIT = 100000.0
BASE_URL = "https://llm.test/api/v1"
CHAT_URL = f"{BASE_URL}/chat/completions"


@pytest.fixture
async def client() -> AsyncGenerator[OpenRouterClient]:
    """Create an initialized client against the test endpoint."""
    client = OpenRouterClient(
        api_key="sk-test",
        base_url=BASE_URL,
        requests_per_minute=TEST_RATE_LIMIT,
    )
    await client.initialize()
    yield client
    await client.shutdown()


class TestOpenRouterClientInitialization:
    """Tests for client initialization and lifecycle."""

    def test_requires_api_key(self) -> None:
        """Should refuse to build without a key."""
        with pytest.raises(LLMConfigurationError):
            OpenRouterClient(api_key="")

    def test_satisfies_protocol(self) -> None:
        """Should be usable wherever the service expects a client."""
        assert isinstance(OpenRouterClient(api_key="sk-test"), LLMClientProtocol)

    def test_chat_url_default(self) -> None:
        """Should use the OpenRouter API by default."""
        client = OpenRouterClient(api_key="sk-test")

        assert client.chat_url == "https://openrouter.ai/api/v1/chat/completions"

    def test_chat_url_strips_trailing_slash(self) -> None:
        """Should normalize a custom base URL."""
        client = OpenRouterClient(api_key="sk-test", base_url=f"{BASE_URL}/")

        assert client.chat_url == CHAT_URL

    async def test_initialize_idempotent(self) -> None:
        """Should be safe to call initialize multiple times."""
        client = OpenRouterClient(api_key="sk-test", requests_per_minute=TEST_RATE_LIMIT)

        await client.initialize()
        first = client._http_client
        await client.initialize()

        assert client._http_client is first
        await client.shutdown()
        assert client._http_client is None


class TestOpenRouterClientComplete:
    """Tests for complete."""

    @respx.mock
    async def test_success(self, client: OpenRouterClient) -> None:
        """Should return the stripped content and usage."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(
                200, json=create_chat_response(f"  {MILK_SUBSTITUTES_CONTENT}\n")
            )
        )

        result = await client.complete("Suggest substitutes for milk")

        assert result.raw_response == MILK_SUBSTITUTES_CONTENT
        assert result.model == "qwen/qwen-2.5-7b-instruct"
        assert result.prompt_tokens == 120
        assert result.completion_tokens == 40
        assert result.duration_ms >= 0

    @respx.mock
    async def test_request_shape(self, client: OpenRouterClient) -> None:
        """Should send a bearer token and a single user message."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response("ok"))
        )

        await client.complete("hello", model="meta/llama-3-8b", temperature=0.5)

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body == {
            "model": "meta/llama-3-8b",
            "messages": [{"role": "user", "content": "hello"}],
            "temperature": 0.5,
        }

    @respx.mock
    async def test_uses_default_model(self, client: OpenRouterClient) -> None:
        """Should fall back to the client's default model."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response("ok"))
        )

        await client.complete("hello")

        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "qwen/qwen-2.5-7b-instruct"
        assert body["temperature"] == 0.0

    @respx.mock
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_content(
        self, client: OpenRouterClient, content: str | None
    ) -> None:
        """Should raise when the reply has no text."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response(content))
        )

        with pytest.raises(LLMEmptyResponseError):
            await client.complete("hello")

    @respx.mock
    async def test_no_choices(self, client: OpenRouterClient) -> None:
        """Should treat a reply without choices as empty."""
        respx.post(CHAT_URL).mock(return_value=httpx.Response(200, json={"choices": []}))

        with pytest.raises(LLMEmptyResponseError):
            await client.complete("hello")


class TestOpenRouterClientErrors:
    """Tests for error mapping."""

    @respx.mock
    async def test_rate_limit(self, client: OpenRouterClient) -> None:
        """Should raise LLMRateLimitError on 429."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(429, headers={"retry-after": "30"})
        )

        with pytest.raises(LLMRateLimitError, match="30s"):
            await client.complete("hello")

    @respx.mock
    async def test_server_error(self, client: OpenRouterClient) -> None:
        """Should raise LLMResponseError on 5xx."""
        respx.post(CHAT_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(LLMResponseError, match="503"):
            await client.complete("hello")

    @respx.mock
    async def test_timeout(self, client: OpenRouterClient) -> None:
        """Should raise LLMTimeoutError on timeouts."""
        respx.post(CHAT_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(LLMTimeoutError):
            await client.complete("hello")

    @respx.mock
    async def test_connection_error(self, client: OpenRouterClient) -> None:
        """Should raise LLMUnavailableError when the endpoint is unreachable."""
        respx.post(CHAT_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(LLMUnavailableError):
            await client.complete("hello")

    @respx.mock
    async def test_malformed_body(self, client: OpenRouterClient) -> None:
        """Should raise LLMResponseError when the body is not JSON."""
        respx.post(CHAT_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with pytest.raises(LLMResponseError, match="malformed"):
            await client.complete("hello")
