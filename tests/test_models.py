"""Tests for shapes, catalog, grid config and rotation."""

import pytest

from backpack_grid.core.errors import CatalogError, ShapeError
from backpack_grid.core.models import Catalog, GridConfig, ItemType, PlacedItem, Shape
from backpack_grid.core.shapes import rotate, rotate_clockwise


class TestShape:
    def test_dimensions_follow_matrix(self):
        shape = Shape.from_matrix([[0, 1, 0], [0, 1, 0], [1, 1, 1], [0, 1, 0]])
        assert shape.width == 3
        assert shape.height == 4
        assert shape.area == 12
        assert shape.cell_count == 6

    def test_offsets_row_major(self):
        boots = Shape.from_matrix([[1, 1], [1, 0]])
        assert list(boots.offsets()) == [(0, 0), (0, 1), (1, 0)]

    def test_mask_matches_cells(self):
        mask = Shape.from_matrix([[1, 0], [1, 1]]).mask()
        assert mask.shape == (2, 2)
        assert mask.tolist() == [[True, False], [True, True]]

    def test_to_matrix_round_values(self):
        assert Shape.from_matrix([[True, False]]).to_matrix() == [[1, 0]]

    @pytest.mark.parametrize("rows", [[], [[]], [[1, 1], [1]]])
    def test_rejects_empty_or_ragged(self, rows):
        with pytest.raises(ShapeError):
            Shape.from_matrix(rows)

    def test_shape_error_is_value_error(self):
        with pytest.raises(ValueError):
            Shape.from_matrix([[1], [1, 1]])


class TestCatalog:
    def test_lookup_and_unknown(self, catalog):
        assert catalog["potion"].height == 2
        assert catalog.get("missing") is None
        assert catalog.shape_of("missing") is None
        assert "boots" in catalog
        assert len(catalog) == 6

    def test_duplicate_ids_rejected(self):
        gem = ItemType("gem", "Gem", "", Shape.from_matrix([[1]]))
        with pytest.raises(CatalogError):
            Catalog([gem, gem])

    def test_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog["new"] = catalog["gem"]


class TestGridConfig:
    def test_defaults(self):
        grid = GridConfig()
        assert (grid.rows, grid.cols, grid.cells) == (8, 8, 64)

    def test_contains(self):
        grid = GridConfig(rows=2, cols=3)
        assert grid.contains(2, 1)
        assert not grid.contains(3, 0)
        assert not grid.contains(0, -1)

    @pytest.mark.parametrize("rows,cols", [(0, 8), (8, 0), (-1, 4)])
    def test_rejects_non_positive(self, rows, cols):
        with pytest.raises(ValueError):
            GridConfig(rows=rows, cols=cols)


class TestPlacedItem:
    def test_moved_to_returns_copy(self):
        item = PlacedItem("a", "gem", 1, 2, rotation=90)
        moved = item.moved_to(5, 6)
        assert (moved.x, moved.y, moved.rotation) == (5, 6, 90)
        assert (item.x, item.y) == (1, 2)


class TestRotation:
    def test_clockwise_l_shape(self):
        bow = Shape.from_matrix([[1, 0], [1, 0], [1, 1]])
        assert rotate_clockwise(bow).to_matrix() == [[1, 1, 1], [1, 0, 0]]

    def test_full_turn_is_identity(self):
        sword = Shape.from_matrix([[0, 1, 0], [0, 1, 0], [1, 1, 1], [0, 1, 0]])
        assert rotate(sword, 360) == sword
        assert rotate(sword, 0) == sword

    def test_half_turn(self):
        boots = Shape.from_matrix([[1, 1], [1, 0]])
        assert rotate(boots, 180).to_matrix() == [[0, 1], [1, 1]]
        assert rotate(boots, -180) == rotate(boots, 180)

    def test_quarter_turn_swaps_dimensions(self):
        potion = Shape.from_matrix([[1], [1]])
        turned = rotate(potion, 90)
        assert (turned.width, turned.height) == (2, 1)

    def test_rejects_non_right_angle(self):
        with pytest.raises(ShapeError):
            rotate(Shape.from_matrix([[1]]), 45)
