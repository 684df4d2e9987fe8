"""Tests for the Backpack facade and two-phase moves."""

import pytest

from backpack_grid.core.backpack import Backpack
from backpack_grid.core.errors import (
    BackpackError,
    CatalogError,
    DuplicateInstanceError,
    ItemNotFoundError,
    PlacementError,
)
from backpack_grid.core.models import Catalog, GridConfig, ItemType, Shape
from backpack_grid.core.validator import find_conflicts

from helpers import make_item


@pytest.fixture
def backpack(catalog, grid):
    return Backpack(catalog, grid)


class TestConstruction:
    def test_defaults_to_8x8(self, catalog):
        assert Backpack(catalog).grid == GridConfig(8, 8)

    def test_accepts_valid_items(self, catalog, grid):
        bp = Backpack(catalog, grid, [make_item("b", "boots"), make_item("g", "gem", 1, 1)])
        assert len(bp) == 2
        assert "g" in bp

    def test_rejects_overlapping_items(self, catalog, grid):
        with pytest.raises(PlacementError):
            Backpack(catalog, grid, [make_item("a", "gem"), make_item("b", "shield")])

    def test_rejects_out_of_bounds_items(self, catalog, grid):
        with pytest.raises(PlacementError):
            Backpack(catalog, grid, [make_item("p", "potion", 0, 7)])

    def test_rejects_duplicate_ids(self, catalog, grid):
        with pytest.raises(DuplicateInstanceError):
            Backpack(catalog, grid, [make_item("a", "gem"), make_item("a", "gem", 3, 3)])


class TestPlace:
    def test_place_then_block(self, backpack):
        potion = backpack.place("potion", 0, 0, instance_id="p1")
        assert potion is not None and (potion.x, potion.y) == (0, 0)
        assert not backpack.can_place("shield", 0, 0)
        assert backpack.place("shield", 0, 0) is None
        assert len(backpack) == 1

    def test_generated_ids_are_unique(self, backpack):
        a = backpack.place("gem", 0, 0)
        b = backpack.place("gem", 1, 0)
        assert a.instance_id != b.instance_id

    def test_rotation_is_stored_only(self, backpack):
        item = backpack.place("potion", 0, 0, rotation=90)
        assert item.rotation == 90
        assert backpack.occupancy()[1, 0] == item.instance_id

    def test_duplicate_id_rejected(self, backpack):
        backpack.place("gem", 0, 0, instance_id="g")
        with pytest.raises(DuplicateInstanceError):
            backpack.place("gem", 5, 5, instance_id="g")

    def test_unknown_type_is_caller_error(self, backpack):
        with pytest.raises(CatalogError):
            backpack.place("dragon", 0, 0)

    def test_remove_and_clear(self, backpack):
        backpack.place("gem", 0, 0, instance_id="g")
        backpack.place("gem", 1, 0, instance_id="h")
        assert backpack.remove("g").instance_id == "g"
        assert backpack.get("g") is None
        with pytest.raises(ItemNotFoundError):
            backpack.remove("g")
        backpack.clear()
        assert len(backpack) == 0

    def test_utilization(self, backpack):
        backpack.place("shield", 0, 0)
        assert backpack.utilization == pytest.approx(4 / 64 * 100)


class TestMove:
    def test_commit_to_free_cell(self, backpack):
        backpack.place("sword", 0, 0, instance_id="s")
        item = backpack.begin_move("s")
        assert "s" not in backpack
        assert backpack.commit_move(item, 4, 4)
        assert (backpack.get("s").x, backpack.get("s").y) == (4, 4)

    def test_commit_overlapping_own_old_cells(self, backpack):
        backpack.place("shield", 0, 0, instance_id="sh")
        item = backpack.begin_move("sh")
        assert backpack.commit_move(item, 1, 0)
        assert backpack.get("sh").x == 1

    def test_failed_commit_restores_original(self, backpack):
        backpack.place("shield", 0, 0, instance_id="sh")
        backpack.place("gem", 5, 5, instance_id="g")
        item = backpack.begin_move("sh")
        assert not backpack.commit_move(item, 4, 4)
        assert (backpack.get("sh").x, backpack.get("sh").y) == (0, 0)
        assert backpack.begin_move("sh") == item

    def test_out_of_bounds_commit_restores_original(self, backpack):
        backpack.place("potion", 2, 2, instance_id="p")
        item = backpack.begin_move("p")
        assert not backpack.commit_move(item, -1, 2)
        assert (backpack.get("p").x, backpack.get("p").y) == (2, 2)

    def test_cancel(self, backpack):
        backpack.place("bow", 3, 3, instance_id="b")
        item = backpack.begin_move("b")
        backpack.cancel_move(item)
        assert (backpack.get("b").x, backpack.get("b").y) == (3, 3)

    def test_vacated_cells_stay_reserved_during_move(self, backpack):
        backpack.place("gem", 0, 0, instance_id="g")
        item = backpack.begin_move("g")
        assert backpack.place("gem", 0, 0, instance_id="intruder") is None
        backpack.cancel_move(item)
        assert find_conflicts(backpack.items, backpack.catalog, backpack.grid) == []

    def test_commit_without_begin(self, backpack):
        item = backpack.place("gem", 0, 0)
        with pytest.raises(ItemNotFoundError):
            backpack.commit_move(item, 1, 1)
        with pytest.raises(ItemNotFoundError):
            backpack.cancel_move(item)

    def test_detached_id_cannot_be_reused(self, backpack):
        backpack.place("gem", 0, 0, instance_id="g")
        backpack.begin_move("g")
        with pytest.raises(DuplicateInstanceError):
            backpack.place("gem", 4, 4, instance_id="g")

    def test_clear_discards_item_being_moved(self, backpack):
        backpack.place("shield", 0, 0, instance_id="sh")
        item = backpack.begin_move("sh")
        backpack.clear()

        assert backpack.place("gem", 0, 0, instance_id="g") is not None
        with pytest.raises(ItemNotFoundError):
            backpack.cancel_move(item)
        with pytest.raises(ItemNotFoundError):
            backpack.commit_move(item, 4, 4)
        assert [it.instance_id for it in backpack.items] == ["g"]
        assert backpack.organize() == []


class TestOrganize:
    def test_replaces_layout(self, catalog, grid):
        bp = Backpack(catalog, grid, [make_item("g", "gem", 7, 7), make_item("s", "shield", 4, 4)])
        dropped = bp.organize()
        assert dropped == []
        assert [(it.instance_id, it.x, it.y) for it in bp.items] == [("s", 0, 0), ("g", 2, 0)]

    def test_returns_dropped_items(self, catalog):
        # Two interlocking L shapes fill a 2×3 grid, but first fit puts the
        # first one in the corner and leaves no room for the second.
        interlocking = Catalog([
            catalog["boots"],
            ItemType("rboots", "Right Boot", "", Shape.from_matrix([[0, 1], [1, 1]])),
        ])
        bp = Backpack(interlocking, GridConfig(rows=2, cols=3), [
            make_item("r", "rboots", 1, 0),
            make_item("b", "boots", 0, 0),
        ])
        dropped = bp.organize()
        assert [it.instance_id for it in dropped] == ["b"]
        assert [(it.instance_id, it.x, it.y) for it in bp.items] == [("r", 0, 0)]

    def test_refuses_during_move(self, backpack):
        backpack.place("gem", 0, 0, instance_id="g")
        backpack.begin_move("g")
        with pytest.raises(BackpackError):
            backpack.organize()
