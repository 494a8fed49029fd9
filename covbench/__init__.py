"""Benchmark harness for coverage path planners on polygons with holes.

Exports the data model, the instance loader and the timing context.
"""

from covbench.loader import load_polygon, load_polygon_file  # noqa: F401
from covbench.models import InstanceCoordinate, ResultRecord  # noqa: F401
from covbench.timing import TimingContext  # noqa: F401

__all__ = [
    "InstanceCoordinate",
    "ResultRecord",
    "TimingContext",
    "load_polygon",
    "load_polygon_file",
]
