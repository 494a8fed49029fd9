"""Baseline lawnmower coverage planner.

Sweeps horizontal lines spaced by the sensor's line spacing across the
(optionally offset) free region and joins the resulting segments in
alternating direction. Transitions between segments are straight lines and
may cross obstacles; this planner only exists to exercise the harness end
to end.
"""

from __future__ import annotations

import logging
from typing import Sequence

from shapely.geometry import LineString, Polygon

from covbench.models import Point
from covbench.planners.base import DecompositionType, Planner, PlannerSettings
from covbench.timing import TimingContext

logger = logging.getLogger("covbench.planners.sweep")


def _polygon_parts(geom) -> list[Polygon]:
    return [g for g in getattr(geom, "geoms", [geom]) if isinstance(g, Polygon) and not g.is_empty]


def _line_parts(geom) -> list[LineString]:
    return [g for g in getattr(geom, "geoms", [geom]) if isinstance(g, LineString) and g.length > 0]


class LawnmowerPlanner(Planner):
    def __init__(self, settings: PlannerSettings):
        super().__init__(settings)
        self._cells: list[Polygon] = []

    def setup(self, timing: TimingContext) -> None:
        self._initialized = False
        if self.settings.decomposition_type is not DecompositionType.BOUSTROPHEDON:
            logger.warning(
                "Lawnmower planner does not support %s decomposition",
                self.settings.decomposition_type.value,
            )
            return
        region = self.settings.polygon
        if self.settings.offset_polygons:
            with timing.timer("poly_offset"):
                region = region.buffer(
                    -0.5 * self.settings.sensor_model.line_spacing, join_style="mitre"
                )
        with timing.timer("decomposition"):
            self._cells = _polygon_parts(region)
        if not self._cells:
            logger.warning("Free region vanished after offsetting")
            return
        self._initialized = True

    def _sweep_segments(self, timing: TimingContext) -> list[tuple[Point, Point]]:
        spacing = self.settings.sensor_model.line_spacing
        segments: list[tuple[Point, Point]] = []
        with timing.timer("sweep_graph"):
            for cell in self._cells:
                minx, miny, maxx, maxy = cell.bounds
                y = miny + 0.5 * spacing
                if y > maxy:
                    y = 0.5 * (miny + maxy)
                row = 0
                while y <= maxy:
                    with timing.timer("line_sweeps"):
                        sweep_line = LineString([(minx - 1.0, y), (maxx + 1.0, y)])
                        hits = _line_parts(cell.intersection(sweep_line))
                    with timing.timer("node_creation"):
                        pieces = sorted((p.bounds[0], p.bounds[2]) for p in hits)
                        if row % 2:
                            pieces.reverse()
                        for x0, x1 in pieces:
                            if row % 2:
                                segments.append(((x1, y), (x0, y)))
                            else:
                                segments.append(((x0, y), (x1, y)))
                    row += 1
                    y += spacing
        return segments

    def solve(self, start: Point, goal: Point, timing: TimingContext) -> Sequence[Point] | None:
        if not self._initialized:
            return None
        segments = self._sweep_segments(timing)
        if not segments:
            return None
        with timing.timer("edge_creation"):
            waypoints: list[Point] = [tuple(start)]
            for a, b in segments:
                waypoints.extend((a, b))
            waypoints.append(tuple(goal))
        return waypoints


PLANNERS = {
    "lawnmower": LawnmowerPlanner,
}
