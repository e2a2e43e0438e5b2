"""Ingredient catalog repository.

Provides read-only queries against the ingredient catalog table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from ingredient_substitution.database.connection import get_database_pool
from ingredient_substitution.observability.logging import get_logger
from ingredient_substitution.schemas import CatalogIngredient


if TYPE_CHECKING:
    from collections.abc import Mapping

    from asyncpg import Pool

logger = get_logger(__name__)


_ALL_INGREDIENTS_QUERY = """
    SELECT
        i.name,
        i.image,
        i.nutrition,
        i.not_allowed_in
    FROM catalog.ingredients i
    ORDER BY i.ingredient_id
"""

_SUBSTITUTES_QUERY = """
    SELECT i.substitutes
    FROM catalog.ingredients i
    WHERE LOWER(i.name->>'en') = LOWER($1)
    LIMIT 1
"""


def decode_json(value: Any) -> Any:
    """Decode a json/jsonb column that arrived as text."""
    if isinstance(value, (str, bytes)):
        return orjson.loads(value)
    return value


class IngredientRepository:
    """Repository for the ingredient catalog.

    The catalog is never written from this service.
    """

    def __init__(self, pool: Pool | None = None) -> None:
        """Initialize repository.

        Args:
            pool: Optional connection pool. If None, uses global pool.
        """
        self._pool = pool

    @property
    def pool(self) -> Pool:
        """Get connection pool."""
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get_all_ingredients(self) -> list[CatalogIngredient]:
        """Fetch every catalog ingredient.

        Returns:
            Ingredients projected to name, image, nutrition and restrictions.
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(_ALL_INGREDIENTS_QUERY)

        ingredients = [self._row_to_ingredient(row) for row in rows]
        logger.debug("Fetched catalog ingredients", count=len(ingredients))
        return ingredients

    async def get_substitutes(self, canonical_name: str) -> list[str]:
        """Fetch the stored substitute list of one ingredient.

        Args:
            canonical_name: Ingredient name (case-insensitive match).

        Returns:
            Substitute names in stored order, empty when none are stored
            or the ingredient does not exist.
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(_SUBSTITUTES_QUERY, canonical_name)

        if row is None:
            return []

        substitutes = decode_json(row["substitutes"]) or []
        return [s for s in substitutes if isinstance(s, str) and s.strip()]

    @staticmethod
    def _row_to_ingredient(row: Mapping[str, Any]) -> CatalogIngredient:
        """Convert a database row to a CatalogIngredient."""
        name = decode_json(row["name"])
        if isinstance(name, str):
            name = {"en": name}

        return CatalogIngredient(
            name=name or {},
            image=row["image"],
            nutrition=decode_json(row["nutrition"]) or {},
            not_allowed_in=list(row["not_allowed_in"] or []),
        )
