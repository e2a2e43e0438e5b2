"""Ingredient vocabulary: cached catalog snapshot and fuzzy matching."""

from ingredient_substitution.vocabulary.cache import VocabularyCache
from ingredient_substitution.vocabulary.matcher import (
    FuzzyMatcher,
    dice_similarity,
    strip_parentheticals,
)


__all__ = [
    "FuzzyMatcher",
    "VocabularyCache",
    "dice_similarity",
    "strip_parentheticals",
]
