"""
Placement validator — pure-function bounds and collision checking.

All checks are stateless functions: they take a candidate shape and
position plus the current item list, and either return a result or raise
a PlacementError explaining the rejection.

Checks:
  1. Bounds    — the whole bounding box must lie inside the grid.
                 Checked first, before any occupancy lookup.
  2. Collision — no solid cell may land on a cell owned by another item.

``can_place`` is the boolean entry point used by callers on every
pointer-move; ``validate_placement`` is the same check with the reason
attached.
"""

from collections.abc import Sequence
from typing import Optional

import numpy as np

from backpack_grid.core.errors import OutOfBoundsError, OverlapError, PlacementError
from backpack_grid.core.models import Catalog, GridConfig, PlacedItem, Shape
from backpack_grid.core.occupancy import build_occupancy


# ─────────────────────────────────────────────────────────────────────────────
# Individual checks
# ─────────────────────────────────────────────────────────────────────────────

def check_bounds(shape: Shape, x: int, y: int, grid: GridConfig) -> None:
    """Raise OutOfBoundsError unless the bounding box fits inside *grid*."""
    if x < 0 or y < 0:
        raise OutOfBoundsError(f"Negative coordinate: ({x}, {y})")
    if x + shape.width > grid.cols:
        raise OutOfBoundsError(f"X overflow: {x}+{shape.width} > {grid.cols}")
    if y + shape.height > grid.rows:
        raise OutOfBoundsError(f"Y overflow: {y}+{shape.height} > {grid.rows}")


def find_collision(
    shape: Shape, x: int, y: int, occupancy: np.ndarray,
) -> Optional[str]:
    """
    First instance id under a solid cell of *shape* at (x, y), or None.

    Assumes the bounds check already passed.
    """
    for r, c in shape.offsets():
        owner = occupancy[y + r, x + c]
        if owner is not None:
            return owner
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Validator
# ─────────────────────────────────────────────────────────────────────────────

def validate_placement(
    shape: Shape,
    x: int,
    y: int,
    items: Sequence[PlacedItem],
    catalog: Catalog,
    grid: GridConfig,
    ignore: Optional[str] = None,
) -> bool:
    """
    Validate a candidate placement against the current items.

    Args:
        shape:   Candidate shape (already rotated by the caller if wanted).
        x, y:    Candidate top-left cell.
        items:   Currently placed items.
        catalog: Item-type lookup for the placed items.
        grid:    Grid dimensions.
        ignore:  Instance id excluded from the occupancy snapshot.

    Returns:
        True if all checks pass.

    Raises:
        OutOfBoundsError: bounding box leaves the grid.
        OverlapError:     a solid cell lands on another item.
    """
    check_bounds(shape, x, y, grid)

    occupancy = build_occupancy(items, catalog, grid, ignore=ignore)
    blocking = find_collision(shape, x, y, occupancy)
    if blocking is not None:
        raise OverlapError(
            f"Shape at ({x}, {y}) overlaps {blocking}", blocking_id=blocking,
        )
    return True


def can_place(
    shape: Shape,
    x: int,
    y: int,
    items: Sequence[PlacedItem],
    catalog: Catalog,
    grid: GridConfig,
    ignore: Optional[str] = None,
) -> bool:
    """True if *shape* fits at (x, y); never raises for illegal placements."""
    try:
        return validate_placement(shape, x, y, items, catalog, grid, ignore=ignore)
    except PlacementError:
        return False


def find_conflicts(
    items: Sequence[PlacedItem], catalog: Catalog, grid: GridConfig,
) -> list[str]:
    """
    Audit a committed layout.

    Returns the instance ids (in input order) whose footprint leaves the grid
    or shares a cell with another item.  An empty list means the layout
    satisfies the no-overlap and in-bounds invariants.  Items with unknown
    types occupy nothing and are never reported.
    """
    owners = np.zeros((grid.rows, grid.cols), dtype=np.int32)
    footprints: list[list[tuple[int, int]]] = []
    conflicts: list[str] = []

    for item in items:
        shape = catalog.shape_of(item.type_id)
        cells = []
        if shape is not None:
            cells = [(item.x + c, item.y + r) for r, c in shape.offsets()]
            if any(not grid.contains(gx, gy) for gx, gy in cells):
                conflicts.append(item.instance_id)
                cells = [(gx, gy) for gx, gy in cells if grid.contains(gx, gy)]
        for gx, gy in cells:
            owners[gy, gx] += 1
        footprints.append(cells)

    for item, cells in zip(items, footprints):
        if item.instance_id in conflicts:
            continue
        if any(owners[gy, gx] > 1 for gx, gy in cells):
            conflicts.append(item.instance_id)

    order = {item.instance_id: i for i, item in enumerate(items)}
    return sorted(conflicts, key=order.__getitem__)
