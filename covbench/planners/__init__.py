"""Planner contract and the built-in baseline planner."""

from covbench.planners.base import (
    PLANNER_TIMER_LABELS,
    DecompositionType,
    LineSensor,
    Planner,
    PlannerSettings,
)
from covbench.planners.sweep import PLANNERS, LawnmowerPlanner

__all__ = [
    "PLANNERS",
    "PLANNER_TIMER_LABELS",
    "DecompositionType",
    "LawnmowerPlanner",
    "LineSensor",
    "Planner",
    "PlannerSettings",
]
