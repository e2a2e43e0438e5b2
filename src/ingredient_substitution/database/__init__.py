"""PostgreSQL catalog access layer.

This module provides:
- Connection pool management
- Read-only repositories for the ingredient catalog and substitution logs
- Store protocols the service depends on
"""

from ingredient_substitution.database.connection import (
    check_database_health,
    close_database_pool,
    get_database_pool,
    init_database_pool,
)
from ingredient_substitution.database.repositories import (
    IngredientCatalog,
    IngredientRepository,
    SubstitutionLogRepository,
    SubstitutionLogStore,
)


__all__ = [
    "IngredientCatalog",
    "IngredientRepository",
    "SubstitutionLogRepository",
    "SubstitutionLogStore",
    "check_database_health",
    "close_database_pool",
    "get_database_pool",
    "init_database_pool",
]
