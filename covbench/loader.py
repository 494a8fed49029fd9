"""Polygon-with-holes instance loader.

An instance file is a YAML document::

    hull:
      points:
        - {x: 0, y: 0}
        - {x: 400, y: 0}
        ...
    holes:
      - points: [...]
      - points: [...]

Raw map units are multiplied by ``map_scale`` on ingestion. Holes are
subtracted one by one from the accumulated region with a Boolean
difference, in file order.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Iterable, TextIO

import shapely
import yaml
from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon

from covbench.errors import (
    BooleanOperationError,
    InstanceNotFoundError,
    InstanceReadError,
    InsufficientVerticesError,
    ParseError,
)
from covbench.matrix import ExperimentMatrix, InstanceCorpus
from covbench.models import Point

logger = logging.getLogger("covbench.loader")

MAP_SCALE = 0.025


class MultiRegionPolicy(str, enum.Enum):
    """What to do when subtracting a hole splits the region in pieces."""

    ERROR = "error"
    FIRST = "first"


def _parse_points(node: Any, section: str, map_scale: float) -> list[Point]:
    if not isinstance(node, dict) or "points" not in node:
        raise ParseError(f"{section}: missing 'points' list")
    points = node["points"]
    if not isinstance(points, list):
        raise ParseError(f"{section}: 'points' must be a list")
    if len(points) < 3:
        raise InsufficientVerticesError(f"{section}: {len(points)} points, need at least 3")
    out: list[Point] = []
    for idx, point in enumerate(points):
        if not isinstance(point, dict) or "x" not in point or "y" not in point:
            raise ParseError(f"{section}: point {idx} lacks 'x' or 'y'")
        try:
            x, y = float(point["x"]), float(point["y"])
        except (TypeError, ValueError) as exc:
            raise ParseError(f"{section}: point {idx} is not numeric") from exc
        out.append((map_scale * x, map_scale * y))
    return out


def _as_polygon(points: list[Point], section: str) -> Polygon:
    poly = Polygon(points)
    if not poly.is_valid or poly.area == 0.0:
        raise ParseError(f"{section}: boundary is not a simple polygon")
    return poly


def subtract_hole(
    region: Polygon,
    hole: Polygon,
    policy: MultiRegionPolicy = MultiRegionPolicy.ERROR,
    grid_size: float | None = None,
) -> Polygon:
    """One step of the hole fold: ``region - hole`` reduced to a single polygon.

    Raises:
        BooleanOperationError: Empty difference, a GEOS failure, or a split
            region under ``MultiRegionPolicy.ERROR``.
    """
    try:
        diff = shapely.difference(region, hole, grid_size=grid_size)
    except GEOSException as exc:
        raise BooleanOperationError(f"difference failed: {exc}") from exc
    parts = [g for g in getattr(diff, "geoms", [diff]) if isinstance(g, Polygon) and not g.is_empty]
    if not parts:
        raise BooleanOperationError("difference produced no region")
    if len(parts) > 1:
        if policy is MultiRegionPolicy.ERROR:
            raise BooleanOperationError(f"difference produced {len(parts)} disjoint regions")
        logger.warning("Difference split region in %d parts; keeping the first", len(parts))
    return parts[0]


def load_polygon(
    stream: TextIO | str,
    map_scale: float = MAP_SCALE,
    multi_region_policy: MultiRegionPolicy = MultiRegionPolicy.ERROR,
    grid_size: float | None = None,
) -> Polygon:
    """Parse one instance document into a validated polygon with holes."""
    try:
        doc = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise ParseError(f"invalid YAML: {exc}") from exc
    if not isinstance(doc, dict) or "hull" not in doc:
        raise ParseError("missing 'hull' section")

    region = _as_polygon(_parse_points(doc["hull"], "hull", map_scale), "hull")
    holes = doc.get("holes") or []
    if not isinstance(holes, list):
        raise ParseError("'holes' must be a list")
    for idx, node in enumerate(holes):
        section = f"holes[{idx}]"
        hole = _as_polygon(_parse_points(node, section, map_scale), section)
        try:
            region = subtract_hole(region, hole, multi_region_policy, grid_size)
        except BooleanOperationError as exc:
            raise BooleanOperationError(f"{section}: {exc}") from exc
    return region


def load_polygon_file(path: str | Path, **kwargs) -> Polygon:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return load_polygon(f, **kwargs)
    except FileNotFoundError as exc:
        raise InstanceNotFoundError(f"instance file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path}: not valid UTF-8") from exc
    except OSError as exc:
        raise InstanceReadError(f"cannot read instance file {path}: {exc}") from exc
    except (ParseError, BooleanOperationError) as exc:
        raise type(exc)(f"{path}: {exc}") from exc


def load_corpus(
    root: str | Path,
    matrix: ExperimentMatrix,
    coordinates: Iterable | None = None,
    **kwargs,
) -> InstanceCorpus:
    """Load every instance of ``matrix`` below ``root``; any failure aborts."""
    coords = list(coordinates) if coordinates is not None else list(matrix.coordinates())
    logger.info("Loading %d test instances from %s", len(coords), root)
    polygons = {}
    for coord in coords:
        polygons[coord] = load_polygon_file(matrix.instance_path(root, coord), **kwargs)
    return InstanceCorpus(polygons)


def load_instance_corpus(
    base_path: str | Path,
    max_obstacles: int,
    step: int,
    replicates: int,
    extension: str = ".yaml",
    **kwargs,
) -> InstanceCorpus:
    matrix = ExperimentMatrix(max_obstacles, step, replicates, extension)
    return load_corpus(base_path, matrix, **kwargs)
