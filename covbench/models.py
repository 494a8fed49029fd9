"""Core data structures of the benchmark harness.

This module defines:
    Point              -- alias for a metric 2D point ``(x, y)``.
    InstanceCoordinate -- (obstacle_bin, replicate) key into the corpus.
    ResultRecord       -- immutable row of one successful planner run.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields

Point = tuple[float, float]


@dataclass(frozen=True, order=True)
class InstanceCoordinate:
    """Structural key of one instance in the corpus.

    Attributes:
        obstacle_bin: Number of obstacles the instance was generated with.
        replicate: Index of the instance inside its bin (0-based).
    """

    obstacle_bin: int
    replicate: int

    @property
    def file_stem(self) -> str:
        return f"{self.replicate:04d}"


@dataclass(frozen=True)
class ResultRecord:
    """Single benchmark row: planner id, instance metrics, cost and timings.

    Field order is the column order of the results file; new metrics must be
    added here so that header and rows stay aligned. All times in seconds.
    """

    planner: str
    num_holes: int
    num_hole_vertices: int
    cost: float
    total_time: float
    total_time_setup: float
    total_time_solve: float
    time_decomposition: float
    time_polygon_adjacency: float
    time_poly_offset: float
    total_time_sweep_graph: float
    total_time_setup_solver: float
    time_line_sweeps: float
    time_node_creation: float
    time_pruning: float
    time_edge_creation: float
    sweep_distance: float
    v_max: float
    a_max: float

    @classmethod
    def column_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def as_row(self) -> tuple:
        return astuple(self)
