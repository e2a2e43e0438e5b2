"""Per-request choice of the generation model.

Several models can be configured with weights to A/B test them; each
request draws one, and that id labels the request's metrics.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from ingredient_substitution.llm.exceptions import LLMConfigurationError


if TYPE_CHECKING:
    from collections.abc import Sequence

    from ingredient_substitution.core.config.settings import GenerationModelSettings


class ModelSelector:
    """Weighted random choice among configured model ids."""

    def __init__(
        self,
        models: Sequence[GenerationModelSettings],
        *,
        rng: random.Random | None = None,
    ) -> None:
        if not models:
            msg = "At least one generation model must be configured"
            raise LLMConfigurationError(msg)

        self._ids = [m.id for m in models]
        self._weights = [m.weight for m in models]
        self._rng = rng or random.Random()  # noqa: S311

    @property
    def model_ids(self) -> list[str]:
        return list(self._ids)

    def select(self) -> str:
        """Draw the model id for one request."""
        if len(self._ids) == 1:
            return self._ids[0]
        return self._rng.choices(self._ids, weights=self._weights, k=1)[0]
