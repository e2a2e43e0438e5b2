"""Substitution service package.

Catalog-first ingredient substitution with LLM fallback generation,
step rewriting and explanations.
"""

from __future__ import annotations

from ingredient_substitution.services.substitution.service import SubstitutionService


__all__ = ["SubstitutionService"]
