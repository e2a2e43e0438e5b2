"""Fuzzy matching of free text against the ingredient vocabulary.

Similarity is the Sørensen-Dice coefficient over character bigrams with
whitespace removed, which is what the 0.77 acceptance threshold was tuned
for. The best candidate is selected with rapidfuzz's extractOne.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import TYPE_CHECKING, Any, Final

from rapidfuzz import process

from ingredient_substitution.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Iterable

    from ingredient_substitution.vocabulary.cache import VocabularyCache

logger = get_logger(__name__)

DEFAULT_THRESHOLD: Final[float] = 0.77
DEFAULT_MAX_SUBSTITUTES: Final[int] = 10

_WHITESPACE_RE = re.compile(r"\s+")
_PARENTHETICAL_RE = re.compile(r"\s*\(.*?\)\s*")


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def dice_similarity(first: str, second: str) -> float:
    """Dice coefficient of two strings' bigram multisets, in [0, 1]."""
    first = _WHITESPACE_RE.sub("", first)
    second = _WHITESPACE_RE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    overlap = sum((_bigrams(first) & _bigrams(second)).values())
    return 2.0 * overlap / (len(first) + len(second) - 2)


def dice_scorer(first: str, second: str, **_kwargs: Any) -> float:
    """rapidfuzz scorer returning the Dice coefficient on a 0-100 scale."""
    return dice_similarity(first, second) * 100.0


def strip_parentheticals(text: str) -> str:
    """Remove parenthetical annotations: "butter (unsalted)" -> "butter"."""
    return _PARENTHETICAL_RE.sub("", text).strip()


class FuzzyMatcher:
    """Map arbitrary strings to the closest known canonical name."""

    def __init__(
        self,
        vocabulary: VocabularyCache,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        max_substitutes: int = DEFAULT_MAX_SUBSTITUTES,
    ) -> None:
        """Initialize the matcher.

        Args:
            vocabulary: Cache providing the canonical names to match against.
            threshold: Minimum similarity (exclusive) to accept a match.
            max_substitutes: Cap for match_substitutes results.
        """
        self._vocabulary = vocabulary
        self.threshold = threshold
        self.max_substitutes = max_substitutes

    def find_closest_match(self, value: object) -> str | None:
        """Return the canonical name closest to value, or None.

        None is returned for non-string or blank input, for an empty
        vocabulary, and when the best score does not exceed the threshold.
        """
        if not isinstance(value, str) or not value.strip():
            return None

        names = self._vocabulary.names
        if not names:
            return None

        best = process.extractOne(value.lower(), names, scorer=dice_scorer)
        if best is None:
            return None

        target, score, _ = best
        if score / 100.0 > self.threshold:
            return target

        logger.debug(
            "No vocabulary match above threshold",
            value=value,
            best_candidate=target,
            score=round(score / 100.0, 3),
        )
        return None

    def match_substitutes(self, raw_names: Iterable[object]) -> list[str]:
        """Match each name, de-duplicate, keep first-seen order, cap the size."""
        matched: dict[str, None] = {}
        for raw in raw_names:
            closest = self.find_closest_match(raw)
            if closest is not None and closest not in matched:
                matched[closest] = None
        return list(matched)[: self.max_substitutes]
