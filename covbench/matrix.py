"""Experiment grid: obstacle bins x replicates, and the loaded corpus.

Corpus layout on disk::

    <build_root>/<package_name>/pwh_instances-prefix/src/pwh_instances/<bin>/<0000>.yaml
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Iterator

from shapely.geometry import Polygon

from covbench.errors import InstanceNotFoundError
from covbench.models import InstanceCoordinate


def instances_root(build_root: str | Path, package_name: str) -> Path:
    return (
        Path(build_root) / package_name / "pwh_instances-prefix" / "src" / "pwh_instances"
    )


class ExperimentMatrix:
    """Fixed enumeration of obstacle bins ``0, step, ..., max_obstacles``."""

    def __init__(self, max_obstacles: int, step: int, replicates: int, extension: str = ".yaml"):
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if max_obstacles < 0 or replicates < 0:
            raise ValueError("max_obstacles and replicates must be non-negative")
        self.max_obstacles = max_obstacles
        self.step = step
        self.replicates = replicates
        self.extension = extension if extension.startswith(".") else f".{extension}"

    def bins(self) -> list[int]:
        return list(range(0, self.max_obstacles + 1, self.step))

    def coordinates(self) -> Iterator[InstanceCoordinate]:
        for obstacle_bin in self.bins():
            for replicate in range(self.replicates):
                yield InstanceCoordinate(obstacle_bin, replicate)

    @property
    def size(self) -> int:
        return len(self.bins()) * self.replicates

    def __contains__(self, coord: object) -> bool:
        return (
            isinstance(coord, InstanceCoordinate)
            and coord.obstacle_bin in self.bins()
            and 0 <= coord.replicate < self.replicates
        )

    def instance_path(self, root: str | Path, coord: InstanceCoordinate) -> Path:
        if coord not in self:
            raise InstanceNotFoundError(
                f"no instance ({coord.obstacle_bin}, {coord.replicate}) in grid "
                f"bins={self.bins()} replicates={self.replicates}"
            )
        return Path(root) / str(coord.obstacle_bin) / f"{coord.file_stem}{self.extension}"


class InstanceCorpus(Mapping):
    """Read-only mapping ``InstanceCoordinate -> Polygon``, fully populated."""

    def __init__(self, polygons: dict[InstanceCoordinate, Polygon]):
        self._polygons = dict(polygons)

    def __getitem__(self, coord: InstanceCoordinate) -> Polygon:
        try:
            return self._polygons[coord]
        except KeyError:
            raise InstanceNotFoundError(
                f"instance ({coord.obstacle_bin}, {coord.replicate}) not in corpus"
            ) from None

    def __contains__(self, coord: object) -> bool:
        return coord in self._polygons

    def get(self, coord, default=None):
        return self._polygons.get(coord, default)

    def __iter__(self) -> Iterator[InstanceCoordinate]:
        return iter(sorted(self._polygons))

    def __len__(self) -> int:
        return len(self._polygons)

    def polygon(self, obstacle_bin: int, replicate: int) -> Polygon:
        return self[InstanceCoordinate(obstacle_bin, replicate)]

    def bins(self) -> list[int]:
        return sorted({c.obstacle_bin for c in self._polygons})


def hole_count(polygon: Polygon) -> int:
    return len(polygon.interiors)


def hole_vertex_count(polygon: Polygon) -> int:
    # rings are stored closed; the repeated first vertex is not counted
    return sum(len(ring.coords) - 1 for ring in polygon.interiors)
