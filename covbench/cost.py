"""Path cost models applied to a waypoint sequence."""

from __future__ import annotations

import math
from functools import partial
from typing import Callable, Sequence

from covbench.models import Point

PathCostFunction = Callable[[Sequence[Point]], float]


def _segment_lengths(waypoints: Sequence[Point]) -> list[float]:
    return [
        math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in zip(waypoints, waypoints[1:])
    ]


def euclidean_path_cost(waypoints: Sequence[Point]) -> float:
    return sum(_segment_lengths(waypoints))


def segment_time(distance: float, v_max: float, a_max: float) -> float:
    """Rest-to-rest travel time over ``distance`` with bounded v and a.

    Short segments never reach ``v_max`` (triangular profile); longer ones
    accelerate, cruise and brake (trapezoidal profile).
    """
    if distance <= 0.0:
        return 0.0
    ramp_distance = v_max * v_max / a_max  # accelerate + decelerate
    if distance < ramp_distance:
        return 2.0 * math.sqrt(distance / a_max)
    return distance / v_max + v_max / a_max


def velocity_ramp_path_cost(waypoints: Sequence[Point], v_max: float, a_max: float) -> float:
    """Total time to follow ``waypoints`` stopping at every vertex."""
    if v_max <= 0.0 or a_max <= 0.0:
        raise ValueError(f"v_max and a_max must be positive (got {v_max}, {a_max})")
    return sum(segment_time(d, v_max, a_max) for d in _segment_lengths(waypoints))


def make_velocity_ramp_cost(v_max: float, a_max: float) -> PathCostFunction:
    return partial(velocity_ramp_path_cost, v_max=v_max, a_max=a_max)
