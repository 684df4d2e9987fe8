"""Right-angle rotation of item shapes.

Rotation is an explicit transform: nothing in the occupancy, validation or
packing code rotates a shape on its own.  A caller that wants a rotated
variant rotates the catalog shape and passes the result to ``can_place``.
"""

from backpack_grid.core.errors import ShapeError
from backpack_grid.core.models import Shape


def rotate_clockwise(shape: Shape) -> Shape:
    """Rotate 90° clockwise: transpose, then reverse each row."""
    transposed = zip(*shape.cells)
    return Shape(tuple(tuple(reversed(col)) for col in transposed))


def normalize_rotation(degrees: int) -> int:
    if degrees % 90 != 0:
        raise ShapeError(f"Rotation must be a multiple of 90°, got {degrees}")
    return degrees % 360


def rotate(shape: Shape, degrees: int) -> Shape:
    """Rotate *shape* clockwise by *degrees* (any multiple of 90)."""
    for _ in range(normalize_rotation(degrees) // 90):
        shape = rotate_clockwise(shape)
    return shape
