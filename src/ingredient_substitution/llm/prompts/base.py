"""Base class for LLM prompts.

Provides a standardized interface for defining prompts with:
- Typed input variables
- A per-task sampling temperature
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class BasePrompt(ABC):
    """Base class for all LLM prompts.

    Centralizes prompt definitions to:
    - Prevent scattered hardcoded strings
    - Enable prompt testing
    - Keep the temperature next to the task it belongs to

    Example:
        ```python
        class GreetingPrompt(BasePrompt):
            temperature = 0.5

            def format(self, **kwargs: Any) -> str:
                return f"Say hello to {kwargs['name']}"
        ```
    """

    temperature: ClassVar[float] = 0.1
    """Temperature for generation (low = more deterministic)."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with input variables.

        Args:
            **kwargs: Variables to substitute into template.

        Returns:
            Formatted prompt string ready for the LLM.

        Raises:
            ValueError: If required variables are missing.
        """
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    @staticmethod
    def require(kwargs: dict[str, Any], *keys: str) -> list[Any]:
        """Return the values of required keys, raising if any is missing."""
        missing = [key for key in keys if kwargs.get(key) is None]
        if missing:
            msg = f"Missing required argument(s): {', '.join(repr(k) for k in missing)}"
            raise ValueError(msg)
        return [kwargs[key] for key in keys]
