"""Substitution request/result schemas."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ingredient_substitution.schemas.ingredient import LocalizedName, VocabularyEntry


class SubstitutionSource(StrEnum):
    """Where a substitute list came from."""

    CATALOG = "catalog"
    GENERATED = "generated"
    NONE = "none"


class SubstitutionCandidate(BaseModel):
    """A substitute name with its conversion ratio.

    The ratio is the amount of substitute that replaces one unit of the
    original ingredient. It must be usable in both directions.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    ratio: float = Field(..., gt=0)

    @property
    def inverse_ratio(self) -> float:
        """Amount of original that replaces one unit of the substitute."""
        return 1.0 / self.ratio


class ResolvedSubstitute(BaseModel):
    """A vocabulary-backed substitute returned to callers.

    ``quantity`` carries the ratio for generated substitutes and stays
    None for catalog-sourced ones.
    """

    name: str
    display_name: LocalizedName = Field(default_factory=LocalizedName)
    image: str | None = None
    nutrition: dict[str, Any] = Field(default_factory=dict)
    not_allowed_in: list[str] = Field(default_factory=list)
    quantity: float | None = None

    @classmethod
    def from_entry(
        cls,
        name: str,
        entry: VocabularyEntry,
        quantity: float | None = None,
    ) -> ResolvedSubstitute:
        """Merge a substitute name with its vocabulary metadata."""
        return cls(
            name=name,
            display_name=entry.name,
            image=entry.image,
            nutrition=dict(entry.nutrition),
            not_allowed_in=list(entry.not_allowed_in),
            quantity=quantity,
        )


class SubstitutionResult(BaseModel):
    """Outcome of a substitution lookup.

    ``ingredient`` is None when the input could not be matched to the
    vocabulary. An empty ``substitutes`` list with a non-null ingredient
    means the ingredient is known but nothing usable was found.
    """

    ingredient: str | None = None
    substitutes: list[ResolvedSubstitute] = Field(default_factory=list)
    source: SubstitutionSource = SubstitutionSource.NONE

    @classmethod
    def unknown(cls) -> SubstitutionResult:
        """Result for an ingredient the vocabulary does not know."""
        return cls(ingredient=None, substitutes=[], source=SubstitutionSource.NONE)


class LoggedSubstitute(BaseModel):
    """One generated substitute as recorded in the substitution log."""

    name: LocalizedName = Field(default_factory=LocalizedName)
    ratio: str | None = None
    picked: int = 0

    @field_validator("ratio", mode="before")
    @classmethod
    def _coerce_ratio(cls, value: Any) -> str | None:
        """Logs may hold numeric ratios; keep them as text."""
        if value is None:
            return None
        return str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Any:
        """Accept a bare string as the English name."""
        if isinstance(value, str):
            return {"en": value}
        return value


class SubstitutionLogEntry(BaseModel):
    """Historical record of a substitution request and the user's pick."""

    ingredient: str
    recipe_context: str | None = None
    generated_substitutes: list[LoggedSubstitute] = Field(default_factory=list)

    @property
    def picked(self) -> LoggedSubstitute | None:
        """The first substitute the user accepted, if any."""
        return next((s for s in self.generated_substitutes if s.picked == 1), None)


class StepRewrite(BaseModel):
    """A recipe step rewritten for a substituted ingredient."""

    title: str = ""
    description: str
