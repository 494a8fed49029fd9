"""Run planner variants over an instance corpus and harvest metrics.

``BenchmarkRunner`` drives a single (planner, instance) pair through
setup -> solve -> cost/time harvesting. ``run_benchmark`` is the batch loop:
obstacle bins -> replicates -> planner variants, strictly sequential.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Type

from shapely.geometry import Polygon

from covbench.config import BenchmarkConfig, FailurePolicy, PlannerSpec
from covbench.cost import PathCostFunction, make_velocity_ramp_cost
from covbench.errors import BenchmarkError, PlannerSetupError, PlannerSolveError
from covbench.matrix import InstanceCorpus, hole_count, hole_vertex_count
from covbench.models import Point, ResultRecord
from covbench.planners import PLANNERS, LineSensor, Planner, PlannerSettings
from covbench.timing import TimingContext

logger = logging.getLogger("covbench.runner")

SETUP_TOTAL = "setup_total"
SOLVE_TOTAL = "solve_total"

# ResultRecord field -> timer label recorded by the planner
TIMER_FIELDS: Dict[str, str] = {
    "total_time_setup": SETUP_TOTAL,
    "total_time_solve": SOLVE_TOTAL,
    "time_decomposition": "decomposition",
    "time_polygon_adjacency": "polygon_adjacency",
    "time_poly_offset": "poly_offset",
    "total_time_sweep_graph": "sweep_graph",
    "total_time_setup_solver": "setup_solver",
    "time_line_sweeps": "line_sweeps",
    "time_node_creation": "node_creation",
    "time_pruning": "pruning",
    "time_edge_creation": "edge_creation",
}


class BenchmarkRunner:
    """Single-attempt execution of one planner on one instance.

    The runner owns a ``TimingContext`` which is reset at the start of every
    run and read right after it, so each record only sees its own timers.
    """

    def __init__(
        self,
        sweep_distance: float,
        v_max: float,
        a_max: float,
        timing: TimingContext | None = None,
    ):
        self.sweep_distance = sweep_distance
        self.v_max = v_max
        self.a_max = a_max
        self.timing = timing if timing is not None else TimingContext()

    def run(
        self,
        planner_name: str,
        planner: Planner,
        polygon: Polygon,
        cost_function: PathCostFunction,
        start: Point,
        goal: Point,
    ) -> ResultRecord:
        """Execute setup and solve once and build the result row.

        Raises:
            PlannerSetupError: Setup raised or the planner is not initialized.
            PlannerSolveError: Solve raised or returned no waypoints.
        """
        timing = self.timing
        timing.reset()

        with timing.timer(SETUP_TOTAL):
            try:
                planner.setup(timing)
            except Exception as e:
                raise PlannerSetupError(f"{planner_name}: setup raised {e!r}") from e
        if not planner.is_initialized():
            raise PlannerSetupError(f"{planner_name}: planner not initialized after setup")

        with timing.timer(SOLVE_TOTAL):
            try:
                waypoints = planner.solve(start, goal, timing)
            except Exception as e:
                raise PlannerSolveError(f"{planner_name}: solve raised {e!r}") from e
        if not waypoints:
            raise PlannerSolveError(f"{planner_name}: no coverage path found")

        cost = float(cost_function(waypoints))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Timing for %s:\n%s", planner_name, timing.format_report())
        logger.info("Path cost (%s): %.3f", planner_name, cost)

        times = {name: timing.total(label) for name, label in TIMER_FIELDS.items()}
        return ResultRecord(
            planner=planner_name,
            num_holes=hole_count(polygon),
            num_hole_vertices=hole_vertex_count(polygon),
            cost=cost,
            total_time=times["total_time_setup"] + times["total_time_solve"],
            sweep_distance=self.sweep_distance,
            v_max=self.v_max,
            a_max=self.a_max,
            **times,
        )


def make_settings(polygon: Polygon, spec: PlannerSpec, config: BenchmarkConfig) -> PlannerSettings:
    return PlannerSettings(
        polygon=polygon,
        path_cost_function=make_velocity_ramp_cost(config.v_max, config.a_max),
        sensor_model=LineSensor(config.sweep_distance, config.overlap),
        sweep_around_obstacles=config.sweep_around_obstacles,
        offset_polygons=config.offset_polygons,
        decomposition_type=spec.decomposition,
    )


def _build_planner(
    registry: Mapping[str, Type[Planner]],
    spec: PlannerSpec,
    polygon: Polygon,
    config: BenchmarkConfig,
) -> Planner:
    try:
        return registry[spec.planner](make_settings(polygon, spec, config))
    except Exception as e:
        raise PlannerSetupError(f"{spec.name}: construction raised {e!r}") from e


def run_benchmark(
    corpus: InstanceCorpus,
    config: BenchmarkConfig,
    registry: Mapping[str, Type[Planner]] | None = None,
    runner: BenchmarkRunner | None = None,
) -> List[ResultRecord]:
    """Run every configured planner on every corpus instance.

    Failed runs are omitted (``FailurePolicy.SKIP``) or re-raised
    (``FailurePolicy.RAISE``). Result order: bin, replicate, planner.
    """
    registry = PLANNERS if registry is None else registry
    specs: Sequence[PlannerSpec] = config.planners
    unknown = [s.planner for s in specs if s.planner not in registry]
    if unknown:
        raise ValueError(f"Unknown planner(s): {unknown}; available: {sorted(registry)}")
    if runner is None:
        runner = BenchmarkRunner(config.sweep_distance, config.v_max, config.a_max)
    cost_function = make_velocity_ramp_cost(config.v_max, config.a_max)

    results: List[ResultRecord] = []
    skipped = 0
    current_bin = None
    for coord in corpus:
        if coord.obstacle_bin != current_bin:
            current_bin = coord.obstacle_bin
            logger.info("Number of holes: %d", current_bin)
        polygon = corpus[coord]
        holes = hole_count(polygon)
        if holes != coord.obstacle_bin:
            logger.warning(
                "Instance %s/%s has %d holes, expected %d",
                coord.obstacle_bin,
                coord.file_stem,
                holes,
                coord.obstacle_bin,
            )
        logger.info(
            "Polygon number: %d (hole vertices: %d)", coord.replicate, hole_vertex_count(polygon)
        )
        for spec in specs:
            try:
                planner = _build_planner(registry, spec, polygon, config)
                record = runner.run(
                    spec.name, planner, polygon, cost_function, config.start, config.goal
                )
            except BenchmarkError as e:
                if config.failure_policy is FailurePolicy.RAISE:
                    raise
                skipped += 1
                logger.warning(
                    "Skipping %s on %s/%s: %s", spec.name, coord.obstacle_bin, coord.file_stem, e
                )
                continue
            results.append(record)
    logger.info("Benchmark finished: %d results, %d failed runs skipped", len(results), skipped)
    return results
