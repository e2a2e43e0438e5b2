"""Unit tests for ModelSelector."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from ingredient_substitution.core.config.settings import GenerationModelSettings
from ingredient_substitution.llm.exceptions import LLMConfigurationError
from ingredient_substitution.llm.selection import ModelSelector


pytestmark = pytest.mark.unit


class TestModelSelector:
    """Tests for weighted model selection."""

    def test_requires_a_model(self) -> None:
        """Should refuse an empty model list."""
        with pytest.raises(LLMConfigurationError):
            ModelSelector([])

    def test_single_model(self) -> None:
        """Should always return the only model."""
        selector = ModelSelector([GenerationModelSettings(id="a")])

        assert {selector.select() for _ in range(20)} == {"a"}
        assert selector.model_ids == ["a"]

    def test_weighted_split(self) -> None:
        """Should draw models in proportion to their weights."""
        selector = ModelSelector(
            [
                GenerationModelSettings(id="control", weight=3.0),
                GenerationModelSettings(id="variant", weight=1.0),
            ],
            rng=random.Random(1234),
        )

        counts = Counter(selector.select() for _ in range(4000))

        assert set(counts) == {"control", "variant"}
        assert 0.7 < counts["control"] / 4000 < 0.8

    def test_deterministic_with_seed(self) -> None:
        """Should be reproducible with a seeded generator."""
        models = [GenerationModelSettings(id="a"), GenerationModelSettings(id="b")]

        first = ModelSelector(models, rng=random.Random(7))
        second = ModelSelector(models, rng=random.Random(7))

        assert [first.select() for _ in range(10)] == [second.select() for _ in range(10)]
