"""Substitution explanation prompt."""

from __future__ import annotations

from typing import Any, ClassVar

from .base import BasePrompt


class SubstitutionExplanationPrompt(BasePrompt):
    """Prompt asking for a short culinary justification, as free text."""

    temperature: ClassVar[float] = 0.5

    def format(self, **kwargs: Any) -> str:
        """Format the prompt.

        Args:
            **kwargs: Must contain 'original' and 'substitute'. May contain
                'recipe_context'.

        Returns:
            Formatted prompt string.

        Raises:
            ValueError: If 'original' or 'substitute' is missing.
        """
        original, substitute = self.require(kwargs, "original", "substitute")
        recipe_context = (kwargs.get("recipe_context") or "").strip()

        return (
            f'Explain why "{substitute}" is a good replacement for "{original}" '
            f"in this recipe:\n{recipe_context}\n"
            "Return a short, clear explanation for culinary users in max 2 sentences."
        )
