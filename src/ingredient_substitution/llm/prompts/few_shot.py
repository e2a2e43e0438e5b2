"""Few-shot examples built from accepted substitutions.

Past substitutions the user actually picked are rendered as short text
blocks and placed ahead of the generation prompt.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable

    from ingredient_substitution.schemas import SubstitutionLogEntry


_WHITESPACE_RE = re.compile(r"\s+")


def build_few_shot_examples(
    logs: Iterable[SubstitutionLogEntry],
    max_examples: int = 3,
    recipe_chars: int = 400,
) -> str:
    """Render up to max_examples accepted substitutions, in log order.

    Entries without a picked substitute, or whose pick lacks an English
    name or a ratio, are skipped.
    """
    if max_examples <= 0:
        return ""

    examples: list[str] = []

    for entry in logs:
        picked = entry.picked
        if picked is None or not picked.name.en or not picked.ratio:
            continue

        recipe = _WHITESPACE_RE.sub(" ", (entry.recipe_context or "").strip())
        examples.append(
            "\n".join(
                [
                    f"Ingredient: {entry.ingredient}",
                    f"Recipe: {recipe[:recipe_chars]}...",
                    f"Picked Substitute: {picked.name.en}",
                    f"Ratio: {picked.ratio}",
                ]
            )
        )

        if len(examples) >= max_examples:
            break

    return "\n\n".join(examples)
