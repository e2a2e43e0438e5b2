"""Pydantic schemas for catalog data and substitution results."""

from ingredient_substitution.schemas.ingredient import (
    CatalogIngredient,
    LocalizedName,
    VocabularyEntry,
)
from ingredient_substitution.schemas.substitution import (
    LoggedSubstitute,
    ResolvedSubstitute,
    StepRewrite,
    SubstitutionCandidate,
    SubstitutionLogEntry,
    SubstitutionResult,
    SubstitutionSource,
)


__all__ = [
    "CatalogIngredient",
    "LocalizedName",
    "LoggedSubstitute",
    "ResolvedSubstitute",
    "StepRewrite",
    "SubstitutionCandidate",
    "SubstitutionLogEntry",
    "SubstitutionResult",
    "SubstitutionSource",
    "VocabularyEntry",
]
