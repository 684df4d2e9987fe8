"""
Backpack — the committed item list behind an interactive inventory.

The pure functions in ``occupancy``, ``validator`` and ``first_fit`` do the
work; this class owns the list of committed items and guarantees that, as
observed from outside, committed items never overlap and never leave the
grid.

Interactive relocation is a two-phase move:

    item = backpack.begin_move("sword-1")   # detached, no longer committed
    ok = backpack.commit_move(item, 3, 2)   # validated; reverts on failure
    # or: backpack.cancel_move(item)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from typing import Optional

import numpy as np

from backpack_grid.algorithms.first_fit import FirstFitOrganizer
from backpack_grid.core.errors import (
    BackpackError,
    CatalogError,
    DuplicateInstanceError,
    ItemNotFoundError,
    PlacementError,
)
from backpack_grid.core.models import Catalog, GridConfig, PlacedItem, Shape
from backpack_grid.core.occupancy import build_occupancy, occupancy_mask
from backpack_grid.core.validator import can_place, find_conflicts

logger = logging.getLogger(__name__)


class Backpack:
    """A fixed-size grid holding non-overlapping placed items."""

    def __init__(
        self,
        catalog: Catalog,
        grid: GridConfig | None = None,
        items: Iterable[PlacedItem] = (),
    ):
        self.catalog = catalog
        self.grid = grid or GridConfig()
        self._items: list[PlacedItem] = []
        self._detached: dict[str, PlacedItem] = {}

        for item in items:
            if item.instance_id in self:
                raise DuplicateInstanceError(
                    f"Instance id {item.instance_id!r} is already placed"
                )
            self._items.append(item)

        conflicts = find_conflicts(self._items, self.catalog, self.grid)
        if conflicts:
            raise PlacementError(
                f"Initial items overlap or leave the grid: {', '.join(conflicts)}"
            )

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def items(self) -> tuple[PlacedItem, ...]:
        """Snapshot of committed items."""
        return tuple(self._items)

    def get(self, instance_id: str) -> Optional[PlacedItem]:
        for item in self._items:
            if item.instance_id == instance_id:
                return item
        return None

    def __contains__(self, instance_id: object) -> bool:
        return any(item.instance_id == instance_id for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def shape_of(self, type_id: str) -> Shape:
        """Catalog shape for *type_id*; raises CatalogError if unknown."""
        shape = self.catalog.shape_of(type_id)
        if shape is None:
            raise CatalogError(f"Unknown item type: {type_id!r}")
        return shape

    def occupancy(self, ignore: Optional[str] = None) -> np.ndarray:
        return build_occupancy(self._items, self.catalog, self.grid, ignore=ignore)

    def can_place(
        self, type_id: str, x: int, y: int, ignore: Optional[str] = None,
    ) -> bool:
        """
        Whether an item of *type_id* fits at (x, y).

        Items detached by ``begin_move`` still reserve the cells they came
        from, so a cancelled move can always return.
        """
        return can_place(
            self.shape_of(type_id), x, y,
            self._items + list(self._detached.values()),
            self.catalog, self.grid, ignore=ignore,
        )

    @property
    def utilization(self) -> float:
        """Occupied cells as a percentage of all grid cells."""
        filled = int(np.count_nonzero(occupancy_mask(self.occupancy())))
        return filled / self.grid.cells * 100

    # ── Mutation ─────────────────────────────────────────────────────────

    def place(
        self,
        type_id: str,
        x: int,
        y: int,
        instance_id: Optional[str] = None,
        rotation: int = 0,
    ) -> Optional[PlacedItem]:
        """
        Commit a new item if the placement is legal.

        Args:
            type_id:     Catalog id of the item.
            x, y:        Top-left grid cell.
            instance_id: Caller-chosen id; a UUID4 is generated if omitted.
            rotation:    Stored on the item, not applied to the shape.

        Returns:
            The committed item, or None if it does not fit at (x, y).

        Raises:
            CatalogError:           *type_id* is not in the catalog.
            DuplicateInstanceError: *instance_id* is already committed or
                                    detached in a move.
        """
        if instance_id is None:
            instance_id = str(uuid.uuid4())
        elif instance_id in self or instance_id in self._detached:
            raise DuplicateInstanceError(f"Instance id {instance_id!r} is already placed")

        if not self.can_place(type_id, x, y):
            logger.debug("Rejected %s at (%d, %d)", type_id, x, y)
            return None

        item = PlacedItem(instance_id, type_id, x, y, rotation)
        self._items.append(item)
        logger.debug("Placed %s (%s) at (%d, %d)", instance_id, type_id, x, y)
        return item

    def remove(self, instance_id: str) -> PlacedItem:
        """Take an item off the grid and return it."""
        for i, item in enumerate(self._items):
            if item.instance_id == instance_id:
                return self._items.pop(i)
        raise ItemNotFoundError(instance_id)

    def clear(self) -> None:
        """Remove every item, including items detached by ``begin_move``."""
        self._items.clear()
        self._detached.clear()

    def organize(self) -> list[PlacedItem]:
        """
        Repack every committed item with first-fit packing.

        Returns:
            Items that no longer fit; they are removed from the backpack.

        Raises:
            BackpackError: a move is in progress.
        """
        if self._detached:
            raise BackpackError(
                f"Cannot organize while moving: {', '.join(self._detached)}"
            )
        organizer = FirstFitOrganizer(self.catalog, self.grid)
        self._items = organizer.organize(self._items)
        if organizer.dropped:
            logger.info(
                "Organize dropped %d item(s): %s",
                len(organizer.dropped),
                ", ".join(item.instance_id for item in organizer.dropped),
            )
        return organizer.dropped

    # ── Two-phase move ───────────────────────────────────────────────────

    def begin_move(self, instance_id: str) -> PlacedItem:
        """Detach a committed item so it can be relocated."""
        item = self.remove(instance_id)
        self._detached[instance_id] = item
        return item

    def commit_move(self, item: PlacedItem, x: int, y: int) -> bool:
        """
        Drop a detached item at (x, y).

        Returns:
            True if the item was committed at (x, y).  On False the item is
            back at the coordinates it had when the move began.
        """
        original = self._detached.get(item.instance_id)
        if original is None:
            raise ItemNotFoundError(f"{item.instance_id!r} is not being moved")
        # Checked while still detached so its own old cells do not block it.
        fits = self.can_place(original.type_id, x, y, ignore=original.instance_id)

        del self._detached[original.instance_id]
        if fits:
            self._items.append(original.moved_to(x, y))
            logger.debug("Moved %s to (%d, %d)", original.instance_id, x, y)
            return True

        self._items.append(original)
        logger.debug(
            "Move of %s to (%d, %d) rejected, restored at (%d, %d)",
            original.instance_id, x, y, original.x, original.y,
        )
        return False

    def cancel_move(self, item: PlacedItem) -> None:
        """Put a detached item back where it was."""
        self._items.append(self._take_detached(item))

    def _take_detached(self, item: PlacedItem) -> PlacedItem:
        try:
            return self._detached.pop(item.instance_id)
        except KeyError:
            raise ItemNotFoundError(
                f"{item.instance_id!r} is not being moved"
            ) from None

    def __repr__(self) -> str:
        return (
            f"Backpack({self.grid.rows}×{self.grid.cols}, "
            f"items={len(self._items)}, "
            f"util={self.utilization:.1f}%)"
        )
