"""Observability components: logging and metrics."""

from ingredient_substitution.observability.logging import (
    bind_context,
    clear_context,
    get_context,
    get_logger,
    logger,
    setup_logging,
    unbind_context,
)
from ingredient_substitution.observability.metrics import SubstitutionMetrics


__all__ = [
    "SubstitutionMetrics",
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "logger",
    "setup_logging",
    "unbind_context",
]
