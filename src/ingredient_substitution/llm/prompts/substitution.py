"""Substitute generation prompt.

Asks the model for up to ten substitutes of an ingredient in the context
of one recipe, as strict JSON with reciprocal-consistent ratios.
"""

from __future__ import annotations

from typing import Any, ClassVar

from .base import BasePrompt


class SubstituteGenerationPrompt(BasePrompt):
    """Prompt for generating ingredient substitutes.

    Example output:
        {
            "substitutes": [
                {"name": "Oat Milk", "ratio": "1.0"},
                {"name": "Almond Milk", "ratio": "1.0"}
            ]
        }
    """

    temperature: ClassVar[float] = 0.0

    max_substitutes: ClassVar[int] = 10

    def format(self, **kwargs: Any) -> str:
        """Format the prompt.

        Args:
            **kwargs: Must contain 'ingredient' and 'recipe'. May contain
                'few_shot', a block of accepted examples placed first.

        Returns:
            Formatted prompt string.

        Raises:
            ValueError: If 'ingredient' or 'recipe' is missing.
        """
        ingredient, recipe = self.require(kwargs, "ingredient", "recipe")
        few_shot = (kwargs.get("few_shot") or "").strip()

        sections: list[str] = []
        if few_shot:
            sections.append(f"Examples of substitutions users accepted:\n\n{few_shot}")

        sections.append(
            f"""Suggest the best {self.max_substitutes} substitutes for "{ingredient}" in this recipe "{recipe}", depending on the role it plays in it (look at quantity and how it is used in the steps).
For each substitute, provide:
1. Its name.
2. A substitution ratio as a decimal number. Ensure that the ratio can logically be applied **in both directions**.
Provide the response in strict JSON format with:
{{
    "substitutes": [
        {{"name": "Substitute Name", "ratio": "Substitution ratio as a decimal number"}}
    ]
}}"""
        )

        return "\n\n".join(sections)
