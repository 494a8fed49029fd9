"""Planner contract consumed by the benchmark runner.

A planner is built from a ``PlannerSettings`` value, prepared once with
``setup`` and then asked for a coverage path with ``solve``. Both calls
receive the run's ``TimingContext``; planners record their internal phases
under the labels listed in ``PLANNER_TIMER_LABELS``.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from shapely.geometry import Polygon

from covbench.cost import PathCostFunction
from covbench.models import Point
from covbench.timing import TimingContext

PLANNER_TIMER_LABELS = (
    "decomposition",
    "polygon_adjacency",
    "poly_offset",
    "sweep_graph",
    "setup_solver",
    "line_sweeps",
    "node_creation",
    "pruning",
    "edge_creation",
)


class DecompositionType(str, enum.Enum):
    BOUSTROPHEDON = "boustrophedon"
    TRAPEZOIDAL = "trapezoidal"


@dataclass(frozen=True)
class LineSensor:
    """Line footprint sweeping ``sweep_distance`` wide with fractional ``overlap``."""

    sweep_distance: float
    overlap: float = 0.0

    def __post_init__(self) -> None:
        if self.sweep_distance <= 0.0:
            raise ValueError(f"sweep_distance must be positive, got {self.sweep_distance}")
        if not 0.0 <= self.overlap < 1.0:
            raise ValueError(f"overlap must be in [0, 1), got {self.overlap}")

    @property
    def line_spacing(self) -> float:
        return self.sweep_distance * (1.0 - self.overlap)


@dataclass(frozen=True)
class PlannerSettings:
    polygon: Polygon
    path_cost_function: PathCostFunction
    sensor_model: LineSensor
    sweep_around_obstacles: bool = False
    offset_polygons: bool = True
    decomposition_type: DecompositionType = DecompositionType.BOUSTROPHEDON


class Planner(ABC):
    """Base class of coverage planners driven by the harness."""

    def __init__(self, settings: PlannerSettings):
        self.settings = settings
        self._initialized = False

    def is_initialized(self) -> bool:
        return self._initialized

    @abstractmethod
    def setup(self, timing: TimingContext) -> None:
        """Precompute whatever ``solve`` needs; set ``_initialized`` on success."""

    @abstractmethod
    def solve(self, start: Point, goal: Point, timing: TimingContext) -> Sequence[Point] | None:
        """Return waypoints from ``start`` to ``goal``; ``None`` means no path."""
