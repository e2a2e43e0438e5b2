"""Ingredient substitution lookup with catalog-first resolution and LLM fallback."""

__version__ = "0.1.0"
