"""Store interfaces consumed by the vocabulary cache and the resolver.

Any object with these coroutine methods can back the service, which keeps
the resolver independent of PostgreSQL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from ingredient_substitution.schemas import CatalogIngredient, SubstitutionLogEntry


@runtime_checkable
class IngredientCatalog(Protocol):
    """Read-only access to the ingredient catalog."""

    async def get_all_ingredients(self) -> list[CatalogIngredient]:
        """Return every ingredient projected to name/image/nutrition/restrictions."""
        ...

    async def get_substitutes(self, canonical_name: str) -> list[str]:
        """Return the stored substitute names for one ingredient (may be empty)."""
        ...


@runtime_checkable
class SubstitutionLogStore(Protocol):
    """Read-only access to historical substitution logs."""

    async def get_picked_logs(self, limit: int | None = None) -> list[SubstitutionLogEntry]:
        """Return log entries with a picked substitute, oldest first."""
        ...
