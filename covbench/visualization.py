import os
from collections import defaultdict
from typing import Iterable, Optional, Sequence

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402
from shapely.geometry import Polygon  # noqa: E402

from covbench.models import Point, ResultRecord  # noqa: E402


def _ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def plot_instance(
    polygon: Polygon,
    save_path: str,
    waypoints: Optional[Sequence[Point]] = None,
    title: Optional[str] = None,
) -> str:
    """Draw a polygon with holes and, optionally, a coverage path over it."""
    fig, ax = plt.subplots(figsize=(8, 8), constrained_layout=True)
    xs, ys = polygon.exterior.xy
    ax.fill(xs, ys, color="#dde8f0", edgecolor="black", linewidth=1.0)
    for ring in polygon.interiors:
        hx, hy = ring.xy
        ax.fill(hx, hy, color="#555555", edgecolor="black", linewidth=0.8)
    if waypoints:
        px = [p[0] for p in waypoints]
        py = [p[1] for p in waypoints]
        ax.plot(px, py, color="#d62728", linewidth=0.8, marker=".", markersize=2)
        ax.plot(px[0], py[0], "go", markersize=6, label="start")
        ax.plot(px[-1], py[-1], "bs", markersize=6, label="goal")
        ax.legend(loc="upper right", fontsize=8, frameon=False)
    ax.set_aspect("equal")
    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")
    if title is None:
        title = f"{len(polygon.interiors)} holes"
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=150)
    plt.close(fig)
    return save_path


def plot_time_vs_holes(
    records: Iterable[ResultRecord],
    save_path: str,
    metric: str = "total_time",
) -> str:
    """Mean of ``metric`` per obstacle count, one line per planner."""
    by_planner: dict = defaultdict(lambda: defaultdict(list))
    for r in records:
        by_planner[r.planner][r.num_holes].append(getattr(r, metric))

    fig, ax = plt.subplots(figsize=(8, 5), constrained_layout=True)
    for planner in sorted(by_planner):
        bins = sorted(by_planner[planner])
        means = [sum(by_planner[planner][b]) / len(by_planner[planner][b]) for b in bins]
        ax.plot(bins, means, marker="o", linewidth=1.5, label=planner)
    ax.set_xlabel("Number of holes")
    ax.set_ylabel(metric.replace("_", " "))
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    if by_planner:
        ax.legend(frameon=False)
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=150)
    plt.close(fig)
    return save_path
