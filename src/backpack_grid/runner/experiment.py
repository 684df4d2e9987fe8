"""Batch runner: organize random item bags and collect packing metrics."""

from __future__ import annotations

import argparse
import logging
import random
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from backpack_grid.algorithms.first_fit import FirstFitOrganizer
from backpack_grid.core.catalog import default_catalog, load_settings
from backpack_grid.core.models import Catalog, GridConfig, PlacedItem
from backpack_grid.core.occupancy import build_occupancy, format_occupancy, occupancy_mask
from backpack_grid.monitoring.metrics import (
    ExperimentMetrics,
    LayoutMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from backpack_grid.runner.dataset import ORDERING_STRATEGIES, spawn_items

logger = logging.getLogger(__name__)


class ExperimentRunner:
    """
    Runs organize over many random item bags.

    Each bag is organized once per ordering strategy; every run is recorded
    as a LayoutMetrics row.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        grid: GridConfig | None = None,
        results_dir: Path | str | None = "results",
    ):
        """
        Args:
            catalog: Item types to spawn (default: built-in catalog)
            grid: Grid dimensions (default: 8×8)
            results_dir: Directory for JSON/CSV output; None disables saving
        """
        self.catalog = catalog if catalog is not None else default_catalog()
        self.grid = grid or GridConfig()
        self.results_dir = Path(results_dir) if results_dir is not None else None
        if self.results_dir is not None:
            self.results_dir.mkdir(parents=True, exist_ok=True)

    def run_experiment(
        self,
        num_datasets: int = 10,
        items_per_dataset: int = 15,
    ) -> ExperimentMetrics:
        """
        Organize *num_datasets* random bags under every ordering.

        Bag ``i`` is spawned and shuffled with seed ``i``, so every ordering,
        including ``random``, is reproducible.
        """
        experiment_id = f"exp_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        metrics = ExperimentMetrics(
            experiment_id=experiment_id,
            grid=f"{self.grid.rows}×{self.grid.cols}",
        )
        logger.info(
            "Starting %s: %d bags × %d orderings, %d items each",
            experiment_id, num_datasets, len(ORDERING_STRATEGIES), items_per_dataset,
        )

        for dataset_idx in range(num_datasets):
            items = spawn_items(self.catalog, count=items_per_dataset, seed=dataset_idx)
            dataset_id = f"bag_{dataset_idx:03d}"

            for ordering_name, ordering_fn in ORDERING_STRATEGIES.items():
                ordered = ordering_fn(items, self.catalog, random.Random(dataset_idx))
                layout = self.organize_once(ordered, dataset_id, ordering_name)
                metrics.add_layout(layout)

        metrics.mark_complete()
        if self.results_dir is not None:
            self._save_results(metrics)
        return metrics

    def organize_once(
        self, items: list[PlacedItem], dataset_id: str, ordering: str,
    ) -> LayoutMetrics:
        """Organize one ordered bag and measure the result."""
        organizer = FirstFitOrganizer(self.catalog, self.grid)
        packed = organizer.organize(items)

        occupancy = build_occupancy(packed, self.catalog, self.grid)
        cells_used = int(np.count_nonzero(occupancy_mask(occupancy)))
        logger.debug("%s/%s layout:\n%s", dataset_id, ordering, format_occupancy(occupancy))

        return LayoutMetrics(
            dataset_id=dataset_id,
            ordering=ordering,
            items_in=len(items),
            items_placed=len(packed),
            items_dropped=len(organizer.dropped),
            cells_used=cells_used,
            cells_total=self.grid.cells,
            utilization_pct=cells_used / self.grid.cells * 100,
        )

    def _save_results(self, metrics: ExperimentMetrics) -> None:
        json_path = self.results_dir / f"{metrics.experiment_id}.json"
        csv_path = self.results_dir / f"{metrics.experiment_id}_layouts.csv"
        export_to_json(metrics, json_path)
        export_to_csv(metrics, csv_path)
        logger.info("Saved results to %s and %s", json_path, csv_path)


def main(argv: list[str] | None = None) -> ExperimentMetrics:
    parser = argparse.ArgumentParser(description="Run backpack organize experiments")
    parser.add_argument(
        "--datasets",
        type=int,
        default=10,
        help="Number of item bags to generate (default: 10)",
    )
    parser.add_argument(
        "--items",
        type=int,
        default=15,
        help="Number of items per bag (default: 15)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="YAML file with grid size and item catalog",
    )
    parser.add_argument(
        "--results-dir",
        default="results",
        help="Directory for JSON/CSV results (default: results)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.settings is not None:
        grid, catalog = load_settings(args.settings)
    else:
        grid, catalog = GridConfig(), default_catalog()

    runner = ExperimentRunner(catalog=catalog, grid=grid, results_dir=args.results_dir)
    metrics = runner.run_experiment(
        num_datasets=args.datasets,
        items_per_dataset=args.items,
    )
    print(print_summary(metrics))
    return metrics


def cli() -> None:
    main()


if __name__ == "__main__":
    cli()
