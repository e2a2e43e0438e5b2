"""Recovery of structured data from free-form model output.

Models asked for "strict JSON" still wrap it in prose or code fences now
and then. parse_json_object tries, in order:

1. the whole text as JSON,
2. the greedy ``{...}`` span of the text as JSON,

and reports which stage succeeded, or why both failed, as a tagged
JsonParseResult. Callers decide whether a failure is fatal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import orjson

from ingredient_substitution.llm.exceptions import LLMParseError
from ingredient_substitution.schemas import SubstitutionCandidate


_BRACE_BLOCK_RE = re.compile(r"\{[\s\S]*\}")
_NUMBER_RE = re.compile(r"[\d.]+")


class ParseStage(StrEnum):
    """Which recovery stage produced a parse result."""

    DIRECT = "direct"
    EXTRACTED = "extracted"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class JsonParseResult:
    """Tagged outcome of parse_json_object."""

    stage: ParseStage
    data: dict[str, Any] = field(default_factory=dict)
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.stage is not ParseStage.FAILED

    def unwrap(self) -> dict[str, Any]:
        """Return the parsed object or raise LLMParseError."""
        if not self.ok:
            raise LLMParseError(self.reason or "Unparseable model response")
        return self.data


def _loads_object(text: str) -> dict[str, Any]:
    value = orjson.loads(text)
    if not isinstance(value, dict):
        msg = f"expected a JSON object, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def parse_json_object(raw: str | None) -> JsonParseResult:
    """Parse a JSON object out of raw model output."""
    if not raw or not raw.strip():
        return JsonParseResult(ParseStage.FAILED, reason="empty response")

    try:
        return JsonParseResult(ParseStage.DIRECT, _loads_object(raw))
    except (orjson.JSONDecodeError, TypeError):
        pass

    match = _BRACE_BLOCK_RE.search(raw)
    if match is None:
        return JsonParseResult(ParseStage.FAILED, reason="no JSON object in response")

    try:
        return JsonParseResult(ParseStage.EXTRACTED, _loads_object(match.group(0)))
    except (orjson.JSONDecodeError, TypeError) as e:
        return JsonParseResult(
            ParseStage.FAILED, reason=f"extracted block is not valid JSON: {e}"
        )


def extract_ratio(value: Any) -> float | None:
    """Parse the leading number of a ratio such as "1.5 cups".

    Returns None when there is no number, it does not parse, or it is zero.
    """
    if value is None or isinstance(value, bool):
        return None

    match = _NUMBER_RE.search(str(value))
    if match is None:
        return None

    try:
        ratio = float(match.group(0))
    except ValueError:
        return None

    return ratio if ratio > 0 else None


def parse_substitute_candidates(payload: dict[str, Any]) -> list[SubstitutionCandidate]:
    """Turn a ``{"substitutes": [...]}`` payload into candidates.

    Entries without a non-empty name or a usable ratio are dropped.
    """
    raw_items = payload.get("substitutes") or []
    if not isinstance(raw_items, list):
        return []

    candidates: list[SubstitutionCandidate] = []
    for item in raw_items:
        if not isinstance(item, dict):
            continue

        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            continue

        ratio = extract_ratio(item.get("ratio"))
        if ratio is None:
            continue

        candidates.append(SubstitutionCandidate(name=name.strip(), ratio=ratio))

    return candidates


def extract_string_field(raw: str | None, field_name: str) -> str | None:
    """Pull ``"field": "value"`` out of text that is not valid JSON."""
    if not raw:
        return None

    pattern = rf'"{re.escape(field_name)}"\s*:\s*"(.*?)"'
    match = re.search(pattern, raw, re.DOTALL)
    if match is None:
        return None

    value = match.group(1).strip()
    return value or None


__all__ = [
    "JsonParseResult",
    "ParseStage",
    "extract_ratio",
    "extract_string_field",
    "parse_json_object",
    "parse_substitute_candidates",
]
