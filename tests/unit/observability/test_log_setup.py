"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
import pytest
from loguru import logger

from ingredient_substitution.observability.logging import (
    InterceptHandler,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    setup_logging,
    unbind_context,
)


if TYPE_CHECKING:
    from collections.abc import Generator


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Start and end every test with an empty logging context."""
    clear_context()
    yield
    clear_context()


@pytest.fixture(autouse=True)
def reset_sinks() -> Generator[None]:
    """Drop sinks bound to captured streams after each test."""
    yield
    logger.remove()


class TestLoggingContext:
    """Tests for context binding."""

    def test_bind_and_get(self) -> None:
        """Should expose bound values."""
        bind_context(request_id="abc-123", ingredient="milk")

        assert get_context() == {"request_id": "abc-123", "ingredient": "milk"}

    def test_unbind(self) -> None:
        """Should remove only the named keys."""
        bind_context(request_id="abc-123", ingredient="milk")

        unbind_context("ingredient", "missing")

        assert get_context() == {"request_id": "abc-123"}

    def test_get_context_returns_copy(self) -> None:
        """Should not let callers mutate the stored context."""
        bind_context(model="a")

        get_context()["model"] = "b"

        assert get_context() == {"model": "a"}


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should emit one JSON object per record with bound context."""
        setup_logging(log_level="INFO", log_format="json")
        bind_context(request_id="req-1")

        get_logger("tests.logging").info("Resolved substitutes", count=3)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = orjson.loads(line)
        assert payload["message"] == "Resolved substitutes"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "tests.logging"
        assert payload["count"] == 3
        assert payload["request_id"] == "req-1"

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should drop records below the configured level."""
        setup_logging(log_level="WARNING", log_format="json")

        get_logger("tests.logging").info("hidden")

        assert "hidden" not in capsys.readouterr().out

    def test_development_text_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should use readable text in development."""
        setup_logging(log_level="DEBUG", log_format="json", is_development=True)

        get_logger("tests.logging").debug("Vocabulary loaded")

        out = capsys.readouterr().out
        assert "Vocabulary loaded" in out
        assert not out.lstrip().startswith("{")

    def test_intercepts_stdlib_logging(self) -> None:
        """Should route the standard library through Loguru."""
        setup_logging(log_level="INFO", log_format="json")

        handlers = logging.getLogger().handlers
        assert any(isinstance(h, InterceptHandler) for h in handlers)
        assert logging.getLogger("httpx").level == logging.WARNING
