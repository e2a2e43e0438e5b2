"""LLM client data models.

Request/response shapes of the OpenAI-compatible chat completions API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Single message in chat format."""

    role: str = Field(..., description="Message role: system, user, or assistant")
    content: str | None = Field(default=None, description="Message content")


class ChatCompletionRequest(BaseModel):
    """Request body for the /chat/completions endpoint."""

    model: str = Field(..., description="Model id (e.g., 'qwen/qwen-2.5-7b-instruct')")
    messages: list[ChatMessage] = Field(..., description="Chat messages")
    temperature: float = Field(default=0.0, description="Sampling temperature")


class ChatUsage(BaseModel):
    """Token usage reported by the endpoint."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChatChoice(BaseModel):
    """Single choice in a chat completion response."""

    index: int = 0
    message: ChatMessage | None = None
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    """Response from the /chat/completions endpoint.

    Providers differ in which fields they fill, so everything but the
    choices list is optional.
    """

    id: str | None = None
    model: str | None = None
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: ChatUsage | None = None

    @property
    def content(self) -> str | None:
        """Stripped content of the first choice, or None if absent/blank."""
        if not self.choices or self.choices[0].message is None:
            return None
        text = (self.choices[0].message.content or "").strip()
        return text or None


class LLMCompletionResult(BaseModel):
    """Internal result of one completion call."""

    raw_response: str = Field(..., description="Text content of the first choice")
    model: str = Field(..., description="Model that generated the response")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(
        default=None, description="Output token count"
    )
    duration_ms: float = Field(default=0.0, description="Wall-clock request time")

    model_config = {"frozen": True}
