"""Exceptions raised by the backpack grid engine.

The pure operations (``can_place``, ``build_occupancy``, ``organize``) report
failure through their return values.  These exceptions are raised by the
explaining variant ``validate_placement``, by catalog/settings loading, and by
the stateful ``Backpack`` facade when the caller hands it inconsistent data.
"""


class BackpackError(Exception):
    """Base class for all backpack grid errors."""


class ShapeError(BackpackError, ValueError):
    """A shape matrix is empty, ragged, or a rotation is not a right angle."""


class CatalogError(BackpackError):
    """An item type is missing from the catalog or a catalog is malformed."""


class PlacementError(BackpackError):
    """Base class for placement validation errors."""


class OutOfBoundsError(PlacementError):
    """Item footprint extends outside the grid."""


class OverlapError(PlacementError):
    """Item footprint covers a cell owned by another placed item."""

    def __init__(self, message: str, blocking_id: str) -> None:
        super().__init__(message)
        self.blocking_id = blocking_id


class DuplicateInstanceError(BackpackError):
    """An instance id is already in use on the grid."""


class ItemNotFoundError(BackpackError, KeyError):
    """No placed item has the requested instance id."""
