"""Item bag generation and input orderings for organize experiments."""

import random
from typing import Callable

from backpack_grid.core.models import Catalog, PlacedItem


def spawn_items(
    catalog: Catalog, count: int = 5, seed: int | None = None,
) -> list[PlacedItem]:
    """
    Draw random item types from the catalog.

    Args:
        catalog: Item types to draw from (uniformly).
        count: Number of items to spawn (default: 5)
        seed: Random seed for reproducibility (default: None)

    Returns:
        Items with ids ``item_000``, ``item_001``, ... at (0, 0); organize
        assigns real coordinates.
    """
    if not catalog:
        raise ValueError("Cannot spawn items from an empty catalog")

    rng = random.Random(seed)
    type_ids = list(catalog)
    return [
        PlacedItem(instance_id=f"item_{i:03d}", type_id=rng.choice(type_ids), x=0, y=0)
        for i in range(count)
    ]


def input_order(
    items: list[PlacedItem], catalog: Catalog, rng: random.Random,
) -> list[PlacedItem]:
    """Items as spawned."""
    return list(items)


def random_order(
    items: list[PlacedItem], catalog: Catalog, rng: random.Random,
) -> list[PlacedItem]:
    """Copy shuffled with *rng*; only affects ties in the area sort."""
    shuffled = items.copy()
    rng.shuffle(shuffled)
    return shuffled


def cell_count_order(
    items: list[PlacedItem], catalog: Catalog, rng: random.Random,
) -> list[PlacedItem]:
    """
    Sort by solid-cell count (largest first).

    Organize re-sorts by bounding-box area, so this only changes the order
    among items whose bounding boxes are equally large.
    """
    return sorted(items, key=lambda it: catalog[it.type_id].shape.cell_count, reverse=True)


# Orderings take the bag, the catalog and a seeded RNG
Ordering = Callable[[list[PlacedItem], Catalog, random.Random], list[PlacedItem]]

# Map of ordering strategy names to functions
ORDERING_STRATEGIES: dict[str, Ordering] = {
    "input": input_order,
    "random": random_order,
    "cell_count": cell_count_order,
}


def get_ordering_strategy(name: str) -> Ordering:
    """
    Get an ordering strategy function by name.

    Raises:
        ValueError: If strategy name is not recognized
    """
    if name not in ORDERING_STRATEGIES:
        raise ValueError(
            f"Unknown ordering strategy: {name}. "
            f"Available: {list(ORDERING_STRATEGIES.keys())}"
        )
    return ORDERING_STRATEGIES[name]
