"""
Item catalog and YAML settings.

The built-in catalog mirrors the stock inventory items.  A settings file can
replace both the catalog and the grid size:

    grid:
      rows: 8
      cols: 8
    items:
      - id: potion
        name: Health Potion
        color: bg-red-500
        shape:
          - [1]
          - [1]
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from backpack_grid.core.errors import CatalogError
from backpack_grid.core.models import Catalog, GridConfig, ItemType, Shape


DEFAULT_ITEM_TYPES: tuple[ItemType, ...] = (
    ItemType("potion", "Health Potion", "bg-red-500",
             Shape.from_matrix([[1], [1]])),
    ItemType("sword", "Iron Sword", "bg-slate-400",
             Shape.from_matrix([[0, 1, 0], [0, 1, 0], [1, 1, 1], [0, 1, 0]])),
    ItemType("shield", "Wooden Shield", "bg-amber-600",
             Shape.from_matrix([[1, 1], [1, 1]])),
    ItemType("bow", "Longbow", "bg-emerald-600",
             Shape.from_matrix([[1, 0], [1, 0], [1, 1]])),
    ItemType("gem", "Magic Gem", "bg-purple-500",
             Shape.from_matrix([[1]])),
    ItemType("boots", "Leather Boots", "bg-yellow-700",
             Shape.from_matrix([[1, 1], [1, 0]])),
)


def default_catalog() -> Catalog:
    return Catalog(DEFAULT_ITEM_TYPES)


# ─────────────────────────────────────────────────────────────────────────────
# Settings file schema
# ─────────────────────────────────────────────────────────────────────────────

class GridSettings(BaseModel):
    rows: int = Field(default=8, gt=0)
    cols: int = Field(default=8, gt=0)


class ItemTypeSettings(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    color: str = ""
    shape: list[list[int]]

    @field_validator("shape")
    @classmethod
    def _rectangular_binary(cls, rows: list[list[int]]) -> list[list[int]]:
        if not rows or not rows[0]:
            raise ValueError("shape must have at least one row and one column")
        width = len(rows[0])
        for r, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"row {r} has {len(row)} cells, expected {width}")
            if any(v not in (0, 1) for v in row):
                raise ValueError(f"row {r} must contain only 0 and 1")
        return rows

    def to_item_type(self) -> ItemType:
        return ItemType(
            id=self.id,
            name=self.name or self.id,
            color=self.color,
            shape=Shape.from_matrix(self.shape),
        )


class BackpackSettings(BaseModel):
    grid: GridSettings = Field(default_factory=GridSettings)
    items: list[ItemTypeSettings]


def parse_settings(data: dict) -> tuple[GridConfig, Catalog]:
    """Validate an already-parsed settings mapping."""
    try:
        settings = BackpackSettings.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid backpack settings: {e}") from e

    grid = GridConfig(rows=settings.grid.rows, cols=settings.grid.cols)
    catalog = Catalog(item.to_item_type() for item in settings.items)
    return grid, catalog


def load_settings(path: Path | str) -> tuple[GridConfig, Catalog]:
    """
    Load grid dimensions and catalog from a YAML file.

    Raises:
        CatalogError: file is not valid YAML, is not a mapping, or fails
                      schema validation.
    """
    path = Path(path)
    with path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"{path}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"{path}: expected a mapping at top level")
    return parse_settings(data)
