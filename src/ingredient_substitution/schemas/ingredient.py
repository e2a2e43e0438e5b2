"""Ingredient catalog schemas.

Shapes of catalog documents as read from the store and of the in-memory
vocabulary entries built from them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LocalizedName(BaseModel):
    """Ingredient name keyed by locale code.

    Only ``en`` is used for matching. Other locales are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    en: str | None = Field(default=None, description="English name")


class CatalogIngredient(BaseModel):
    """Catalog document projected to the fields the vocabulary needs."""

    name: LocalizedName = Field(default_factory=LocalizedName)
    image: str | None = None
    nutrition: dict[str, Any] = Field(default_factory=dict)
    not_allowed_in: list[str] = Field(default_factory=list)

    @property
    def canonical_name(self) -> str | None:
        """Lower-cased English name, or None when the document has none."""
        if not self.name.en:
            return None
        return self.name.en.strip().lower() or None


class VocabularyEntry(BaseModel):
    """Metadata for one known ingredient, keyed by its canonical name."""

    model_config = ConfigDict(frozen=True)

    canonical_name: str
    name: LocalizedName = Field(default_factory=LocalizedName)
    image: str | None = None
    nutrition: dict[str, Any] = Field(default_factory=dict)
    not_allowed_in: list[str] = Field(default_factory=list)

    @classmethod
    def from_catalog(cls, canonical_name: str, doc: CatalogIngredient) -> VocabularyEntry:
        """Build an entry from a catalog document."""
        return cls(
            canonical_name=canonical_name,
            name=doc.name,
            image=doc.image,
            nutrition=doc.nutrition,
            not_allowed_in=doc.not_allowed_in,
        )

    @classmethod
    def empty(cls, canonical_name: str) -> VocabularyEntry:
        """Entry used for names the vocabulary does not know."""
        return cls(canonical_name=canonical_name.lower())
