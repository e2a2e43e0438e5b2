"""Substitution log repository.

Reads the history of generated substitutes and which one the user picked.
Used only to seed few-shot prompt examples.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ingredient_substitution.database.connection import get_database_pool
from ingredient_substitution.database.repositories.ingredient import decode_json
from ingredient_substitution.observability.logging import get_logger
from ingredient_substitution.schemas import SubstitutionLogEntry


if TYPE_CHECKING:
    from collections.abc import Mapping

    from asyncpg import Pool

logger = get_logger(__name__)


_PICKED_LOGS_QUERY = """
    SELECT
        l.ingredient,
        l.recipe_context,
        l.generated_substitutes
    FROM catalog.substitution_logs l
    WHERE EXISTS (
        SELECT 1
        FROM jsonb_array_elements(l.generated_substitutes) AS s
        WHERE s->>'picked' = '1'
    )
    ORDER BY l.log_id
"""


class SubstitutionLogRepository:
    """Repository for historical substitution logs."""

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

    async def get_picked_logs(self, limit: int | None = None) -> list[SubstitutionLogEntry]:
        """Fetch logs where a substitute was picked, in insertion order.

        Args:
            limit: Optional maximum number of rows.

        Returns:
            Parsed log entries. Rows that fail validation are skipped.
        """
        async with self.pool.acquire() as conn:
            if limit is None:
                rows = await conn.fetch(_PICKED_LOGS_QUERY)
            else:
                rows = await conn.fetch(f"{_PICKED_LOGS_QUERY} LIMIT $1", limit)

        entries: list[SubstitutionLogEntry] = []
        for row in rows:
            entry = self._row_to_entry(row)
            if entry is not None:
                entries.append(entry)
        return entries

    @staticmethod
    def _row_to_entry(row: Mapping[str, Any]) -> SubstitutionLogEntry | None:
        """Convert a database row to a SubstitutionLogEntry."""
        try:
            return SubstitutionLogEntry(
                ingredient=row["ingredient"],
                recipe_context=row["recipe_context"],
                generated_substitutes=decode_json(row["generated_substitutes"]) or [],
            )
        except ValueError as e:
            logger.warning(
                "Skipping malformed substitution log row",
                ingredient=row["ingredient"],
                error=str(e),
            )
            return None
