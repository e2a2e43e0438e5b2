"""Vocabulary unit test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fixtures.catalog import sample_catalog


if TYPE_CHECKING:
    from ingredient_substitution.schemas import CatalogIngredient


pytestmark = pytest.mark.unit


@pytest.fixture
def catalog_ingredients() -> list[CatalogIngredient]:
    """Catalog documents returned by the mock catalog."""
    return sample_catalog()


@pytest.fixture
def mock_catalog(catalog_ingredients: list[CatalogIngredient]) -> MagicMock:
    """Create a mock ingredient catalog."""
    catalog = MagicMock()
    catalog.get_all_ingredients = AsyncMock(return_value=catalog_ingredients)
    catalog.get_substitutes = AsyncMock(return_value=[])
    return catalog
