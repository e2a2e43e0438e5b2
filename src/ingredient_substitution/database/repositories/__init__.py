"""Database repositories."""

from ingredient_substitution.database.repositories.ingredient import IngredientRepository
from ingredient_substitution.database.repositories.protocol import (
    IngredientCatalog,
    SubstitutionLogStore,
)
from ingredient_substitution.database.repositories.substitution_log import (
    SubstitutionLogRepository,
)


__all__ = [
    "IngredientCatalog",
    "IngredientRepository",
    "SubstitutionLogRepository",
    "SubstitutionLogStore",
]
