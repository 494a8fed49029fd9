from pathlib import Path

import pytest

from covbench.config import (
    DEFAULT_RESULTS_FILE,
    FailurePolicy,
    PlannerSpec,
    load_config,
    parse_config,
)
from covbench.loader import MultiRegionPolicy
from covbench.planners import DecompositionType


def test_defaults_match_standard_setup() -> None:
    cfg = parse_config(None)
    assert cfg.instances.max_obstacles == 5
    assert cfg.instances.step == 5
    assert cfg.instances.replicates == 10
    assert cfg.instances.map_scale == 0.025
    assert cfg.instances.multi_region_policy is MultiRegionPolicy.ERROR
    assert cfg.planners == (PlannerSpec("our_bcd"),)
    assert (cfg.sweep_distance, cfg.overlap, cfg.v_max, cfg.a_max) == (3.0, 0.0, 3.0, 1.0)
    assert cfg.start == cfg.goal == (0.0, 0.0)
    assert cfg.offset_polygons and not cfg.sweep_around_obstacles
    assert cfg.failure_policy is FailurePolicy.SKIP
    assert cfg.results_file == DEFAULT_RESULTS_FILE


def test_full_config(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(
        """
log_level: debug
instances:
  build_root: /ws/build
  max_obstacles: 20
  step: 10
  replicates: 3
  multi_region_policy: FIRST
  grid_size: 0.001
planners:
  - {name: bcd, decomposition: boustrophedon}
  - {name: tcd, planner: lawnmower, decomposition: trapezoidal}
sensor: {sweep_distance: 2.0, overlap: 0.1}
cost: {v_max: 2.0, a_max: 0.5}
run: {start: [1, 2], goal: [3, 4], failure_policy: raise}
output: {results_file: out.csv, summary: summary.csv}
""",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.instances.multi_region_policy is MultiRegionPolicy.FIRST
    assert cfg.instances.grid_size == 0.001
    assert cfg.instances.resolve_root() == Path(
        "/ws/build/mav_coverage_planning_ros/pwh_instances-prefix/src/pwh_instances"
    )
    assert [p.decomposition for p in cfg.planners] == [
        DecompositionType.BOUSTROPHEDON,
        DecompositionType.TRAPEZOIDAL,
    ]
    assert cfg.start == (1.0, 2.0) and cfg.goal == (3.0, 4.0)
    assert cfg.failure_policy is FailurePolicy.RAISE
    assert cfg.summary_file == "summary.csv"
    assert cfg.log_level == "debug"


def test_explicit_root_wins() -> None:
    cfg = parse_config({"instances": {"root": "data/pwh", "build_root": "/ignored"}})
    assert cfg.instances.resolve_root() == Path("data/pwh")


def test_missing_root_is_reported() -> None:
    with pytest.raises(ValueError, match="build_root"):
        parse_config({}).instances.resolve_root()


@pytest.mark.parametrize(
    "raw",
    [
        {"instances": {"multi_region_policy": "largest"}},
        {"run": {"failure_policy": "retry"}},
        {"run": {"start": [1]}},
        {"planners": []},
        {"planners": [{"decomposition": "boustrophedon"}]},
        {"planners": [{"name": "a"}, {"name": "a"}]},
        {"planners": [{"name": "a,b"}]},
        {"planners": [{"name": "a", "decomposition": "voronoi"}]},
        {"sensor": [1, 2]},
        {"sensor": {"sweep_distance": 0}},
        {"sensor": {"overlap": 1.0}},
        {"sensor": {"overlap": -0.1}},
        {"cost": {"v_max": 0}},
        {"cost": {"a_max": -1}},
        {"instances": {"step": 0}},
        {"instances": {"replicates": -1}},
        {"instances": {"max_obstacles": -5}},
        {"instances": {"map_scale": 0}},
        ["not", "a", "mapping"],
    ],
)
def test_invalid_values(raw: dict) -> None:
    with pytest.raises(ValueError):
        parse_config(raw)


@pytest.mark.parametrize(
    ("raw", "key"),
    [
        ({"cost": {"v_max": 0}}, "cost.v_max"),
        ({"sensor": {"overlap": 1.5}}, "sensor.overlap"),
        ({"instances": {"step": -5}}, "instances.step"),
    ],
)
def test_range_errors_name_the_key(raw: dict, key: str) -> None:
    with pytest.raises(ValueError, match=key):
        parse_config(raw)
