"""Unit tests for VocabularyCache.

Tests cover:
- Lazy, single-query loading
- Concurrent first loads
- TTL expiry and invalidation
- Failing catalog behavior
- Metadata lookup
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from ingredient_substitution.vocabulary.cache import VocabularyCache


if TYPE_CHECKING:
    from unittest.mock import MagicMock

    from ingredient_substitution.schemas import CatalogIngredient


pytestmark = pytest.mark.unit


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestVocabularyLoading:
    """Tests for ensure_loaded."""

    async def test_starts_unloaded(self, mock_catalog: MagicMock) -> None:
        """Should not query the catalog until asked."""
        cache = VocabularyCache(mock_catalog)

        assert cache.is_loaded is False
        assert cache.names == []
        mock_catalog.get_all_ingredients.assert_not_called()

    async def test_loads_lower_cased_names_in_catalog_order(
        self, mock_catalog: MagicMock
    ) -> None:
        """Should key entries by lower-cased English name, skipping nameless docs."""
        cache = VocabularyCache(mock_catalog)

        await cache.ensure_loaded()

        assert cache.is_loaded is True
        assert cache.names == [
            "milk",
            "oat milk",
            "almond milk",
            "soy milk",
            "butter",
            "coconut oil",
        ]
        assert len(cache) == 6
        assert "Oat Milk" in cache
        assert 42 not in cache

    async def test_repeated_calls_query_once(self, mock_catalog: MagicMock) -> None:
        """Should be idempotent once loaded."""
        cache = VocabularyCache(mock_catalog)

        await cache.ensure_loaded()
        await cache.ensure_loaded()
        await cache.ensure_loaded()

        mock_catalog.get_all_ingredients.assert_awaited_once()

    async def test_concurrent_first_loads_query_once(
        self,
        mock_catalog: MagicMock,
        catalog_ingredients: list[CatalogIngredient],
    ) -> None:
        """Should serialize concurrent loads into a single catalog query."""

        async def slow_load() -> list[CatalogIngredient]:
            await asyncio.sleep(0.01)
            return catalog_ingredients

        mock_catalog.get_all_ingredients = AsyncMock(side_effect=slow_load)
        cache = VocabularyCache(mock_catalog)

        await asyncio.gather(*(cache.ensure_loaded() for _ in range(10)))

        mock_catalog.get_all_ingredients.assert_awaited_once()
        assert len(cache) == 6

    async def test_failing_catalog_leaves_cache_unloaded(
        self,
        mock_catalog: MagicMock,
        catalog_ingredients: list[CatalogIngredient],
    ) -> None:
        """Should stay empty on failure and retry on the next call."""
        mock_catalog.get_all_ingredients = AsyncMock(
            side_effect=[ConnectionError("catalog down"), catalog_ingredients]
        )
        cache = VocabularyCache(mock_catalog)

        await cache.ensure_loaded()

        assert cache.is_loaded is False
        assert cache.names == []

        await cache.ensure_loaded()

        assert cache.is_loaded is True
        assert mock_catalog.get_all_ingredients.await_count == 2


class TestVocabularyExpiry:
    """Tests for TTL and invalidation."""

    async def test_without_ttl_never_expires(self, mock_catalog: MagicMock) -> None:
        """Should keep the snapshot indefinitely by default."""
        clock = FakeClock()
        cache = VocabularyCache(mock_catalog, clock=clock)

        await cache.ensure_loaded()
        clock.now += 10 * 365 * 24 * 3600
        await cache.ensure_loaded()

        mock_catalog.get_all_ingredients.assert_awaited_once()

    async def test_reloads_after_ttl(self, mock_catalog: MagicMock) -> None:
        """Should reload once the snapshot is older than the TTL."""
        clock = FakeClock()
        cache = VocabularyCache(mock_catalog, ttl_seconds=60, clock=clock)

        await cache.ensure_loaded()
        clock.now += 59
        await cache.ensure_loaded()
        assert mock_catalog.get_all_ingredients.await_count == 1

        clock.now += 1
        assert cache.is_loaded is False
        await cache.ensure_loaded()
        assert mock_catalog.get_all_ingredients.await_count == 2

    async def test_invalidate_forces_reload(self, mock_catalog: MagicMock) -> None:
        """Should drop the snapshot and reload on next use."""
        cache = VocabularyCache(mock_catalog)
        await cache.ensure_loaded()

        cache.invalidate()

        assert cache.is_loaded is False
        assert len(cache) == 0

        await cache.ensure_loaded()
        assert mock_catalog.get_all_ingredients.await_count == 2


class TestGetEntry:
    """Tests for metadata lookup."""

    async def test_known_entry(self, mock_catalog: MagicMock) -> None:
        """Should return stored metadata case-insensitively."""
        cache = VocabularyCache(mock_catalog)
        await cache.ensure_loaded()

        entry = cache.get_entry("Almond Milk")

        assert entry.canonical_name == "almond milk"
        assert entry.image == "almond-milk.png"
        assert entry.not_allowed_in == ["nut-free"]
        assert entry.name.model_extra["fr"] == "Almond Milk (fr)"

    async def test_unknown_entry_is_empty(self, mock_catalog: MagicMock) -> None:
        """Should return an empty entry for names it does not know."""
        cache = VocabularyCache(mock_catalog)
        await cache.ensure_loaded()

        entry = cache.get_entry("Dragon Fruit")

        assert entry.canonical_name == "dragon fruit"
        assert entry.image is None
        assert entry.nutrition == {}
        assert entry.not_allowed_in == []
