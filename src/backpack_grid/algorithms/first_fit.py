"""First-fit grid packing ("organize")."""

import logging
from collections.abc import Sequence

import numpy as np

from backpack_grid.core.models import Catalog, GridConfig, PlacedItem, Shape

logger = logging.getLogger(__name__)


class FirstFitOrganizer:
    """
    Largest-area-first, first-fit packing.

    Sorts items by bounding-box area (largest first, stable on ties), then
    scans top-left positions row by row and takes the first one where the
    shape does not hit an already-packed cell.  Items with no fitting
    position are left out of the result.
    """

    def __init__(self, catalog: Catalog, grid: GridConfig):
        self.catalog = catalog
        self.grid = grid
        self.dropped: list[PlacedItem] = []

    def organize(self, items: Sequence[PlacedItem]) -> list[PlacedItem]:
        """
        Compute a packed layout for *items*.

        Args:
            items: Items to pack; current coordinates are ignored.

        Returns:
            New list of relocated items in packing order.  Items that did not
            fit are omitted and recorded in ``self.dropped``.
        """
        self.dropped = []

        packable = []
        for item in items:
            if item.type_id in self.catalog:
                packable.append(item)
            else:
                logger.warning(
                    "Cannot pack %s: unknown item type %r",
                    item.instance_id, item.type_id,
                )
                self.dropped.append(item)

        # sorted() is stable, so equal areas keep their input order.
        ordered = sorted(
            packable, key=lambda it: self.catalog[it.type_id].area, reverse=True,
        )

        packed_cells = np.zeros((self.grid.rows, self.grid.cols), dtype=bool)
        result: list[PlacedItem] = []

        for item in ordered:
            shape = self.catalog[item.type_id].shape
            position = self._first_fit(shape, packed_cells)
            if position is None:
                logger.debug("No room for %s (%s)", item.instance_id, item.type_id)
                self.dropped.append(item)
                continue

            x, y = position
            packed_cells[y:y + shape.height, x:x + shape.width] |= shape.mask()
            result.append(item.moved_to(x, y))
            logger.debug("Packed %s at (%d, %d)", item.instance_id, x, y)

        return result

    def _first_fit(self, shape: Shape, packed_cells: np.ndarray) -> tuple[int, int] | None:
        """First (x, y) in row-major order where *shape* fits, or None."""
        mask = shape.mask()
        for y in range(self.grid.rows - shape.height + 1):
            for x in range(self.grid.cols - shape.width + 1):
                region = packed_cells[y:y + shape.height, x:x + shape.width]
                if not np.any(region & mask):
                    return x, y
        return None


def organize(
    items: Sequence[PlacedItem], catalog: Catalog, grid: GridConfig,
) -> list[PlacedItem]:
    """Pack *items* with a fresh FirstFitOrganizer."""
    return FirstFitOrganizer(catalog, grid).organize(items)
