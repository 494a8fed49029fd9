"""YAML configuration of a benchmark batch.

Every key is optional; missing keys fall back to the standard benchmark setup
(obstacle bins 0 and 5, ten replicates each, 3 m sweeps, v_max 3 m/s,
a_max 1 m/s^2, start = goal = origin).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from covbench.loader import MAP_SCALE, MultiRegionPolicy
from covbench.matrix import instances_root
from covbench.models import Point
from covbench.planners.base import DecompositionType

DEFAULT_RESULTS_FILE = "/tmp/coverage_results.txt"


class FailurePolicy(str, enum.Enum):
    """What the batch loop does when a single planner run fails."""

    SKIP = "skip"
    RAISE = "raise"


@dataclass(frozen=True)
class PlannerSpec:
    """Planner variant under test: result label, registry key and decomposition."""

    name: str
    planner: str = "lawnmower"
    decomposition: DecompositionType = DecompositionType.BOUSTROPHEDON


@dataclass(frozen=True)
class InstanceConfig:
    build_root: str | None = None
    package_name: str = "mav_coverage_planning_ros"
    root: str | None = None
    max_obstacles: int = 5
    step: int = 5
    replicates: int = 10
    extension: str = ".yaml"
    map_scale: float = MAP_SCALE
    multi_region_policy: MultiRegionPolicy = MultiRegionPolicy.ERROR
    grid_size: float | None = None

    def resolve_root(self) -> Path:
        if self.root:
            return Path(self.root)
        if not self.build_root:
            raise ValueError("instances.root or instances.build_root must be set")
        return instances_root(self.build_root, self.package_name)


@dataclass(frozen=True)
class BenchmarkConfig:
    instances: InstanceConfig = field(default_factory=InstanceConfig)
    planners: tuple[PlannerSpec, ...] = (PlannerSpec("our_bcd"),)
    sweep_distance: float = 3.0
    overlap: float = 0.0
    v_max: float = 3.0
    a_max: float = 1.0
    start: Point = (0.0, 0.0)
    goal: Point = (0.0, 0.0)
    sweep_around_obstacles: bool = False
    offset_polygons: bool = True
    failure_policy: FailurePolicy = FailurePolicy.SKIP
    results_file: str = DEFAULT_RESULTS_FILE
    summary_file: str | None = None
    plots_dir: str | None = None
    log_level: str = "INFO"


def _section(cfg: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = cfg.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping")
    return value


def _point(value: Any, key: str) -> Point:
    try:
        x, y = value
        return float(x), float(y)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{key}' must be a pair of numbers, got {value!r}") from e


def _enum(enum_cls, value: Any, key: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError as e:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"'{key}' must be one of: {choices} (got {value!r})") from e


def _require(ok: bool, key: str, value: Any, rule: str) -> None:
    if not ok:
        raise ValueError(f"'{key}' must be {rule}, got {value!r}")


def _validate(config: BenchmarkConfig) -> None:
    inst = config.instances
    _require(inst.max_obstacles >= 0, "instances.max_obstacles", inst.max_obstacles, ">= 0")
    _require(inst.step > 0, "instances.step", inst.step, "> 0")
    _require(inst.replicates >= 0, "instances.replicates", inst.replicates, ">= 0")
    _require(inst.map_scale > 0, "instances.map_scale", inst.map_scale, "> 0")
    _require(
        inst.grid_size is None or inst.grid_size >= 0,
        "instances.grid_size",
        inst.grid_size,
        ">= 0",
    )
    _require(config.sweep_distance > 0, "sensor.sweep_distance", config.sweep_distance, "> 0")
    _require(0 <= config.overlap < 1, "sensor.overlap", config.overlap, "in [0, 1)")
    _require(config.v_max > 0, "cost.v_max", config.v_max, "> 0")
    _require(config.a_max > 0, "cost.a_max", config.a_max, "> 0")


def parse_config(cfg: Dict[str, Any] | None) -> BenchmarkConfig:
    """Build a ``BenchmarkConfig`` from an already loaded YAML mapping."""
    cfg = cfg or {}
    if not isinstance(cfg, dict):
        raise ValueError("config root must be a mapping")
    inst = _section(cfg, "instances")
    sensor = _section(cfg, "sensor")
    cost = _section(cfg, "cost")
    run = _section(cfg, "run")
    output = _section(cfg, "output")
    defaults = BenchmarkConfig()
    d_inst = defaults.instances

    instances = InstanceConfig(
        build_root=inst.get("build_root"),
        package_name=inst.get("package_name", d_inst.package_name),
        root=inst.get("root"),
        max_obstacles=int(inst.get("max_obstacles", d_inst.max_obstacles)),
        step=int(inst.get("step", d_inst.step)),
        replicates=int(inst.get("replicates", d_inst.replicates)),
        extension=str(inst.get("extension", d_inst.extension)),
        map_scale=float(inst.get("map_scale", d_inst.map_scale)),
        multi_region_policy=_enum(
            MultiRegionPolicy,
            inst.get("multi_region_policy", d_inst.multi_region_policy.value),
            "instances.multi_region_policy",
        ),
        grid_size=(float(inst["grid_size"]) if inst.get("grid_size") is not None else None),
    )

    planners_cfg = cfg.get("planners")
    if planners_cfg is None:
        planners = defaults.planners
    else:
        if not isinstance(planners_cfg, list) or not planners_cfg:
            raise ValueError("'planners' must be a non-empty list")
        specs = []
        for idx, p in enumerate(planners_cfg):
            if not isinstance(p, dict) or not p.get("name"):
                raise ValueError(f"planners[{idx}] needs a 'name'")
            if any(ch in str(p["name"]) for ch in ',"\n\r'):
                raise ValueError(f"planners[{idx}].name must be a plain identifier")
            specs.append(
                PlannerSpec(
                    name=str(p["name"]),
                    planner=str(p.get("planner", "lawnmower")),
                    decomposition=_enum(
                        DecompositionType,
                        p.get("decomposition", DecompositionType.BOUSTROPHEDON.value),
                        f"planners[{idx}].decomposition",
                    ),
                )
            )
        names = [s.name for s in specs]
        if len(set(names)) != len(names):
            raise ValueError(f"planner names must be unique: {names}")
        planners = tuple(specs)

    config = BenchmarkConfig(
        instances=instances,
        planners=planners,
        sweep_distance=float(sensor.get("sweep_distance", defaults.sweep_distance)),
        overlap=float(sensor.get("overlap", defaults.overlap)),
        v_max=float(cost.get("v_max", defaults.v_max)),
        a_max=float(cost.get("a_max", defaults.a_max)),
        start=_point(run.get("start", defaults.start), "run.start"),
        goal=_point(run.get("goal", defaults.goal), "run.goal"),
        sweep_around_obstacles=bool(
            run.get("sweep_around_obstacles", defaults.sweep_around_obstacles)
        ),
        offset_polygons=bool(run.get("offset_polygons", defaults.offset_polygons)),
        failure_policy=_enum(
            FailurePolicy,
            run.get("failure_policy", defaults.failure_policy.value),
            "run.failure_policy",
        ),
        results_file=str(output.get("results_file", defaults.results_file)),
        summary_file=output.get("summary"),
        plots_dir=output.get("plots_dir"),
        log_level=str(cfg.get("log_level", defaults.log_level)),
    )
    _validate(config)
    return config


def load_config(config_file: str | Path = "config.yaml") -> BenchmarkConfig:
    """Load configuration from YAML file."""
    with open(config_file, "r", encoding="utf-8") as file:
        return parse_config(yaml.safe_load(file))
