"""Shared test configuration for the ingredient substitution service tests.

Tests run against the ``test`` configuration environment unless a test
overrides APP_ENV itself.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from ingredient_substitution.core.config import get_settings


if TYPE_CHECKING:
    from collections.abc import Generator


os.environ.setdefault("APP_ENV", "test")


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None]:
    """Drop cached settings so environment changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
