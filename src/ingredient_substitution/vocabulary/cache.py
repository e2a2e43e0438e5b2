"""In-memory snapshot of the ingredient vocabulary.

The snapshot is loaded lazily from the catalog on first use and kept until
its TTL expires or it is invalidated. Loads are serialized with a lock so
concurrent first requests trigger a single catalog query.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from ingredient_substitution.observability.logging import get_logger
from ingredient_substitution.schemas import VocabularyEntry


if TYPE_CHECKING:
    from collections.abc import Callable

    from ingredient_substitution.database.repositories.protocol import IngredientCatalog
    from ingredient_substitution.schemas import CatalogIngredient

logger = get_logger(__name__)


class VocabularyCache:
    """Known ingredient names and metadata, keyed by lower-cased name.

    Attributes:
        ttl_seconds: Snapshot lifetime; None keeps it until invalidate().
    """

    def __init__(
        self,
        catalog: IngredientCatalog,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty, unloaded cache.

        Args:
            catalog: Store to load ingredients from.
            ttl_seconds: Optional snapshot lifetime in seconds.
            clock: Monotonic clock used for TTL checks.
        """
        self._catalog = catalog
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._names: list[str] = []
        self._entries: dict[str, VocabularyEntry] = {}
        self._loaded_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        """Whether a fresh snapshot is available."""
        if self._loaded_at is None:
            return False
        if self.ttl_seconds is None:
            return True
        return self._clock() - self._loaded_at < self.ttl_seconds

    @property
    def names(self) -> list[str]:
        """Canonical names in catalog order."""
        return self._names

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    async def ensure_loaded(self) -> None:
        """Load the snapshot unless a fresh one is already present.

        A failing catalog leaves the cache empty and unloaded, so matching
        degrades to "no match" and the next call tries again.
        """
        if self.is_loaded:
            return

        async with self._lock:
            if self.is_loaded:
                return

            try:
                ingredients = await self._catalog.get_all_ingredients()
            except Exception:
                logger.exception("Failed to load ingredient vocabulary")
                return

            self._populate(ingredients)

    def invalidate(self) -> None:
        """Drop the snapshot; the next ensure_loaded() reloads it."""
        self._names = []
        self._entries = {}
        self._loaded_at = None
        logger.info("Ingredient vocabulary invalidated")

    def get_entry(self, name: str) -> VocabularyEntry:
        """Look up metadata for a name, case-insensitively.

        Unknown names get an empty entry (no image, nutrition or restrictions).
        """
        key = name.lower()
        entry = self._entries.get(key)
        if entry is None:
            return VocabularyEntry.empty(key)
        return entry

    def _populate(self, ingredients: list[CatalogIngredient]) -> None:
        names: list[str] = []
        entries: dict[str, VocabularyEntry] = {}

        for doc in ingredients:
            key = doc.canonical_name
            if key is None:
                continue
            names.append(key)
            entries[key] = VocabularyEntry.from_catalog(key, doc)

        self._names = names
        self._entries = entries
        self._loaded_at = self._clock()
        logger.info("Ingredient vocabulary loaded", count=len(entries))
