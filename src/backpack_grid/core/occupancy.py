"""
Occupancy resolver — per-cell ownership map of a grid snapshot.

The occupancy grid is a numpy object array (rows × cols) where each cell
holds the owning instance id or ``None``.  It is rebuilt from the item list
on every call; nothing is cached between calls.

Usage:
    occ = build_occupancy(items, catalog, grid, ignore="sword-1")
    owner = occ[y, x]
"""

import logging
import string
from collections.abc import Iterable
from typing import Optional

import numpy as np

from backpack_grid.core.models import Catalog, GridConfig, PlacedItem

logger = logging.getLogger(__name__)

FREE_CELL = "."
_LABELS = string.ascii_uppercase + string.ascii_lowercase + string.digits


def build_occupancy(
    items: Iterable[PlacedItem],
    catalog: Catalog,
    grid: GridConfig,
    ignore: Optional[str] = None,
) -> np.ndarray:
    """
    Map every grid cell to the instance id occupying it.

    Args:
        items:   Placed items (may be empty).
        catalog: Item-type lookup for shapes.
        grid:    Grid dimensions.
        ignore:  Instance id to leave out, so an item being moved does not
                 collide with itself.

    Returns:
        Fresh object array of shape (grid.rows, grid.cols).

    Items whose type is not in the catalog contribute nothing.  Solid cells
    falling outside the grid are dropped.  If two items claim the same cell
    the later one in *items* wins.
    """
    occupancy = np.full((grid.rows, grid.cols), None, dtype=object)

    for item in items:
        if item.instance_id == ignore:
            continue
        shape = catalog.shape_of(item.type_id)
        if shape is None:
            logger.debug(
                "Skipping %s: unknown item type %r", item.instance_id, item.type_id
            )
            continue

        for r, c in shape.offsets():
            gx = item.x + c
            gy = item.y + r
            # Bounds are checked explicitly: numpy would wrap negative indices.
            if grid.contains(gx, gy):
                occupancy[gy, gx] = item.instance_id

    return occupancy


def occupancy_mask(occupancy: np.ndarray) -> np.ndarray:
    """Boolean array, True where a cell is owned by some item."""
    return np.vectorize(lambda owner: owner is not None, otypes=[bool])(occupancy)


def format_occupancy(occupancy: np.ndarray) -> str:
    """
    Text overlay of an occupancy grid, one character per cell.

    Free cells print as ``.``; each instance gets a letter in order of first
    appearance (row-major), cycling if there are more instances than labels.
    """
    labels: dict[str, str] = {}
    lines = []
    for row in occupancy:
        chars = []
        for owner in row:
            if owner is None:
                chars.append(FREE_CELL)
                continue
            if owner not in labels:
                labels[owner] = _LABELS[len(labels) % len(_LABELS)]
            chars.append(labels[owner])
        lines.append("".join(chars))
    return "\n".join(lines)
