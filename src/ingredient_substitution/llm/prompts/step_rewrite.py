"""Recipe step rewrite prompt."""

from __future__ import annotations

from typing import Any, ClassVar

from .base import BasePrompt


# Extra imperative-mood hints for locales where the model tends to drift
_IMPERATIVE_HINTS: dict[str, str] = {
    "fr": "utilisez l'impératif (e.g., Mélangez, Coupez, Faites cuire)",
}


class StepRewritePrompt(BasePrompt):
    """Prompt for rewriting an instruction step after an ingredient swap.

    Example output:
        {"title": "Whisk the oat milk", "description": "Whisk the oat milk into the eggs."}
    """

    temperature: ClassVar[float] = 0.1

    def format(self, **kwargs: Any) -> str:
        """Format the prompt.

        Args:
            **kwargs: Must contain 'original_step', 'original_ingredient' and
                'substitute_ingredient'. 'locale' defaults to "en".

        Returns:
            Formatted prompt string.

        Raises:
            ValueError: If a required argument is missing.
        """
        original_step, original, substitute = self.require(
            kwargs, "original_step", "original_ingredient", "substitute_ingredient"
        )
        locale = kwargs.get("locale") or "en"

        imperative = "Use the imperative form (e.g., Mix, Chop, Bake)."
        hint = _IMPERATIVE_HINTS.get(locale.split("-")[0].lower())
        if hint:
            imperative = f"{imperative} In this language, {hint}."

        return f"""You are rewriting a cooking instruction step for a recipe in this language: "{locale}".

Original step:
"{original_step}"

The ingredient "{original}" has been replaced with "{substitute}".

Your task:
- Rewrite the step so it makes sense with the new ingredient in the specified language.
- {imperative}
- Make sure the action suits the substitute.
- Keep it short and natural.
- Do NOT mention "{original}" at all.

Return ONLY a JSON object like this:
{{
"title": "Short step title (action-based)",
"description": "Rewritten step using the substitute ingredient"
}}
Make sure it's valid JSON. No explanation, no formatting, no notes."""
