"""
backpack-grid — placement and packing engine for grid inventories.

Public API:
    from backpack_grid import Backpack, Catalog, GridConfig, PlacedItem, Shape
    from backpack_grid import build_occupancy, can_place, organize
    from backpack_grid import default_catalog, load_settings
"""

from .algorithms.first_fit import FirstFitOrganizer, organize
from .core.backpack import Backpack
from .core.catalog import default_catalog, load_settings
from .core.errors import (
    BackpackError,
    CatalogError,
    DuplicateInstanceError,
    ItemNotFoundError,
    OutOfBoundsError,
    OverlapError,
    PlacementError,
    ShapeError,
)
from .core.models import Catalog, GridConfig, ItemType, PlacedItem, Shape
from .core.occupancy import build_occupancy, format_occupancy
from .core.shapes import rotate
from .core.validator import can_place, find_conflicts, validate_placement

__all__ = [
    # Models
    "Catalog",
    "GridConfig",
    "ItemType",
    "PlacedItem",
    "Shape",
    # Operations
    "build_occupancy",
    "can_place",
    "validate_placement",
    "find_conflicts",
    "organize",
    "FirstFitOrganizer",
    "format_occupancy",
    "rotate",
    # Facade & config
    "Backpack",
    "default_catalog",
    "load_settings",
    # Errors
    "BackpackError",
    "CatalogError",
    "DuplicateInstanceError",
    "ItemNotFoundError",
    "OutOfBoundsError",
    "OverlapError",
    "PlacementError",
    "ShapeError",
]
