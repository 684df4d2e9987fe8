"""Builders shared by the test modules."""

from backpack_grid.core.models import PlacedItem


def make_item(instance_id, type_id, x=0, y=0):
    return PlacedItem(instance_id=instance_id, type_id=type_id, x=x, y=y)
