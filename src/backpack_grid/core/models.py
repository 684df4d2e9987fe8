"""
Core data models for the backpack grid.

All modules import their core types from here to ensure consistency
across the occupancy, validation, packing and runner layers.

Classes:
    Shape      — immutable boolean occupancy matrix of an item type
    ItemType   — catalog entry: id, display metadata and shape
    PlacedItem — one instance of an item type at a top-left grid cell
    Catalog    — read-only mapping from item-type id to ItemType
    GridConfig — grid dimensions (rows × cols)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Optional

import numpy as np

from backpack_grid.core.errors import CatalogError, ShapeError


# ─────────────────────────────────────────────────────────────────────────────
# Shape
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Shape:
    """
    Rectangular boolean matrix; ``True`` marks a solid cell.

    ``cells[row][col]`` — rows run down (y), columns run right (x).
    Width and height are the dense bounding box, so they always equal the
    column and row counts of the matrix.
    """

    cells: tuple[tuple[bool, ...], ...]

    def __post_init__(self) -> None:
        if not self.cells or not self.cells[0]:
            raise ShapeError("Shape must have at least one row and one column")
        width = len(self.cells[0])
        for r, row in enumerate(self.cells):
            if len(row) != width:
                raise ShapeError(
                    f"Ragged shape: row {r} has {len(row)} cells, expected {width}"
                )

    @classmethod
    def from_matrix(cls, rows: Sequence[Sequence[int | bool]]) -> "Shape":
        """Build a shape from nested 0/1 (or bool) rows."""
        return cls(tuple(tuple(bool(v) for v in row) for row in rows))

    @property
    def width(self) -> int:
        return len(self.cells[0])

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def area(self) -> int:
        """Bounding-box area, not the number of solid cells."""
        return self.width * self.height

    @property
    def cell_count(self) -> int:
        """Number of solid cells."""
        return sum(sum(row) for row in self.cells)

    def offsets(self) -> Iterator[tuple[int, int]]:
        """Yield ``(row, col)`` of every solid cell in row-major order."""
        for r, row in enumerate(self.cells):
            for c, filled in enumerate(row):
                if filled:
                    yield r, c

    def mask(self) -> np.ndarray:
        """Boolean numpy array (height × width) of solid cells."""
        return np.array(self.cells, dtype=bool)

    def to_matrix(self) -> list[list[int]]:
        return [[int(v) for v in row] for row in self.cells]

    def __repr__(self) -> str:
        return f"Shape({self.width}×{self.height}, cells={self.cell_count})"


# ─────────────────────────────────────────────────────────────────────────────
# Item types & placed items
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ItemType:
    """
    A catalog entry.

    Attributes:
        id:    Item-type identifier referenced by PlacedItem.type_id.
        name:  Display name (not used by placement logic).
        color: Display colour hint (not used by placement logic).
        shape: Occupancy shape shared by every instance of this type.
    """
    id: str
    name: str
    color: str
    shape: Shape

    @property
    def width(self) -> int:
        return self.shape.width

    @property
    def height(self) -> int:
        return self.shape.height

    @property
    def area(self) -> int:
        return self.shape.area


@dataclass(frozen=True)
class PlacedItem:
    """
    One concrete item on the grid.

    Frozen so item lists can be shared between the caller and the engine
    without risk of accidental mutation; relocation returns a copy.

    Attributes:
        instance_id: Unique among the items currently on the grid.
        type_id:     Key into the Catalog.
        x, y:        Top-left grid cell of the shape's bounding box.
        rotation:    0/90/180/270, carried for callers; never applied
                     implicitly by occupancy, validation or packing.
    """
    instance_id: str
    type_id: str
    x: int
    y: int
    rotation: int = 0

    def moved_to(self, x: int, y: int) -> "PlacedItem":
        return replace(self, x=x, y=y)


# ─────────────────────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────────────────────

class Catalog(Mapping[str, ItemType]):
    """
    Immutable mapping from item-type id to ItemType.

    Constructed once and passed explicitly to every operation; there is no
    process-wide catalog.
    """

    __slots__ = ("_types",)

    def __init__(self, item_types: Iterable[ItemType] = ()) -> None:
        types: dict[str, ItemType] = {}
        for item_type in item_types:
            if item_type.id in types:
                raise CatalogError(f"Duplicate item type id: {item_type.id!r}")
            types[item_type.id] = item_type
        self._types = MappingProxyType(types)

    def __getitem__(self, type_id: str) -> ItemType:
        return self._types[type_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def shape_of(self, type_id: str) -> Optional[Shape]:
        """Shape for *type_id*, or None when the type is unknown."""
        item_type = self._types.get(type_id)
        return item_type.shape if item_type is not None else None

    def __repr__(self) -> str:
        return f"Catalog({', '.join(self._types)})"


# ─────────────────────────────────────────────────────────────────────────────
# Grid
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GridConfig:
    """
    Grid dimensions.  Cells are addressed ``(x, y)`` with
    ``x in [0, cols)`` and ``y in [0, rows)``.
    """
    rows: int = 8
    cols: int = 8

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {self.rows}×{self.cols}"
            )

    @property
    def cells(self) -> int:
        return self.rows * self.cols

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows
