"""Shared fixtures for the backpack grid tests."""

import os
import sys

import pytest

# Ensure the src/ layout and the test helpers are importable without an install
sys.path.insert(0, os.path.dirname(__file__))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from backpack_grid.core.catalog import default_catalog
from backpack_grid.core.models import Catalog, GridConfig, ItemType, Shape


@pytest.fixture
def catalog():
    """The built-in six-item catalog."""
    return default_catalog()


@pytest.fixture
def grid():
    """Standard 8×8 backpack."""
    return GridConfig(rows=8, cols=8)


@pytest.fixture
def unit_catalog():
    """Catalog with a single 1×1 item type."""
    return Catalog([ItemType("gem", "Gem", "", Shape.from_matrix([[1]]))])
