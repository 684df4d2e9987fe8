"""Metrics tracking and export for organize experiments.

Provides dataclasses for tracking layout metrics and utilities for
exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
import statistics
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

LAYOUT_FIELDS = [
    "dataset_id", "ordering", "items_in", "items_placed", "items_dropped",
    "cells_used", "cells_total", "utilization_pct", "organized_at",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LayoutMetrics:
    """Metrics for a single organize run.

    Attributes:
        dataset_id: Item bag this layout was packed from.
        ordering: Input ordering applied before organizing.
        items_in: Number of items handed to organize.
        items_placed: Number of items in the packed layout.
        items_dropped: Number of items that did not fit.
        cells_used: Grid cells covered by solid item cells.
        cells_total: Total grid cells.
        utilization_pct: cells_used / cells_total as a percentage (0-100).
        organized_at: Timestamp of the run.
    """

    dataset_id: str
    ordering: str
    items_in: int
    items_placed: int
    items_dropped: int
    cells_used: int
    cells_total: int
    utilization_pct: float
    organized_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamp.

        Example:
            >>> lm = LayoutMetrics("bag_000", "input", 5, 4, 1, 10, 64, 15.6)
            >>> lm.to_dict()["items_dropped"]
            1
        """
        d = asdict(self)
        d["organized_at"] = self.organized_at.isoformat()
        return d


@dataclass
class ExperimentMetrics:
    """Aggregate metrics for an experiment run.

    Attributes:
        experiment_id: Unique identifier for the experiment.
        grid: Grid dimensions as "rows×cols".
        total_layouts: Number of organize runs recorded.
        total_items: Items handed to organize across all runs.
        total_dropped: Items dropped across all runs.
        avg_utilization_pct / median / min / max: Utilization statistics.
        runtime_seconds: Total runtime in seconds.
        started_at: Experiment start timestamp.
        completed_at: Experiment completion timestamp (None if running).
        layout_metrics: Per-run metrics.
    """

    experiment_id: str
    grid: str
    total_layouts: int = 0
    total_items: int = 0
    total_dropped: int = 0
    avg_utilization_pct: float = 0.0
    median_utilization_pct: float = 0.0
    min_utilization_pct: float = 0.0
    max_utilization_pct: float = 0.0
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    layout_metrics: list[LayoutMetrics] = field(default_factory=list)

    def add_layout(self, layout: LayoutMetrics) -> None:
        """Add one organize run to the experiment.

        Example:
            >>> em = ExperimentMetrics("exp_001", "8×8")
            >>> em.add_layout(LayoutMetrics("bag_000", "input", 5, 4, 1, 10, 64, 15.625))
            >>> em.total_dropped
            1
        """
        self.layout_metrics.append(layout)
        self.total_layouts += 1
        self.total_items += layout.items_in
        self.total_dropped += layout.items_dropped
        self._recalculate_stats()

    def mark_complete(self) -> None:
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def _recalculate_stats(self) -> None:
        utilizations = [m.utilization_pct for m in self.layout_metrics]
        if not utilizations:
            return
        self.avg_utilization_pct = statistics.fmean(utilizations)
        self.median_utilization_pct = statistics.median(utilizations)
        self.min_utilization_pct = min(utilizations)
        self.max_utilization_pct = max(utilizations)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["layout_metrics"] = [m.to_dict() for m in self.layout_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Aggregate metrics only, without the per-run list."""
        d = self.to_dict()
        del d["layout_metrics"]
        return d


def export_to_json(metrics: ExperimentMetrics, output_path: Path | str, include_layouts: bool = True) -> None:
    """Export experiment metrics to a JSON file.

    Args:
        metrics: ExperimentMetrics instance to export.
        output_path: Path to output JSON file.
        include_layouts: If False, write the summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_layouts else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: ExperimentMetrics, output_path: Path | str) -> None:
    """Export per-run metrics to a CSV file (header only if there are none)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=LAYOUT_FIELDS)
        writer.writeheader()
        for layout in metrics.layout_metrics:
            writer.writerow(layout.to_dict())


def print_summary(metrics: ExperimentMetrics) -> str:
    """Generate human-readable summary of experiment metrics.

    Returns:
        Formatted multi-line summary string.
    """
    lines = [
        "=" * 60,
        f"Experiment: {metrics.experiment_id}",
        f"Grid: {metrics.grid}",
        "=" * 60,
        f"Layouts: {metrics.total_layouts}",
        f"Items:   {metrics.total_items}",
        f"Dropped: {metrics.total_dropped}",
        "",
        "Utilization Statistics:",
        f"  Average: {metrics.avg_utilization_pct:.2f}%",
        f"  Median:  {metrics.median_utilization_pct:.2f}%",
        f"  Min:     {metrics.min_utilization_pct:.2f}%",
        f"  Max:     {metrics.max_utilization_pct:.2f}%",
        "",
        f"Runtime: {metrics.runtime_seconds:.3f} seconds",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
