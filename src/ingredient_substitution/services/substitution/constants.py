"""Constants for the substitution service.

Contains:
- Fallback values returned when the model cannot be used
"""

from __future__ import annotations

from typing import Final


# =============================================================================
# Degraded Results
# =============================================================================

EXPLANATION_UNAVAILABLE: Final[str] = "No explanation available."
