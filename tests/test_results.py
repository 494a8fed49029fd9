from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from covbench.errors import ParseError, ResultsWriteError
from covbench.experiments.aggregate import summarize, write_summary_csv
from covbench.experiments.results import RESULT_COLUMNS, read_results_csv, write_results_csv
from covbench.models import ResultRecord
from covbench.visualization import plot_instance, plot_time_vs_holes

HEADER = (
    "planner,num_holes,num_hole_vertices,cost,total_time,total_time_setup,total_time_solve,"
    "time_decomposition,time_polygon_adjacency,time_poly_offset,total_time_sweep_graph,"
    "total_time_setup_solver,time_line_sweeps,time_node_creation,time_pruning,"
    "time_edge_creation,sweep_distance,v_max,a_max"
)


def _record(planner: str = "our_bcd", num_holes: int = 5, cost: float = 100.0) -> ResultRecord:
    return ResultRecord(
        planner=planner,
        num_holes=num_holes,
        num_hole_vertices=4 * num_holes,
        cost=cost,
        total_time=0.5,
        total_time_setup=0.2,
        total_time_solve=0.3,
        time_decomposition=0.1,
        time_polygon_adjacency=0.0,
        time_poly_offset=0.05,
        total_time_sweep_graph=0.25,
        total_time_setup_solver=0.0,
        time_line_sweeps=0.2,
        time_node_creation=0.01,
        time_pruning=0.0,
        time_edge_creation=0.02,
        sweep_distance=3.0,
        v_max=3.0,
        a_max=1.0,
    )


def test_columns_are_the_fixed_contract() -> None:
    assert len(RESULT_COLUMNS) == 19
    assert ",".join(RESULT_COLUMNS) == HEADER


def test_write_header_plus_one_row_per_record(tmp_path: Path) -> None:
    records = [_record(), _record("other", 0, 42.5)]
    out = write_results_csv(tmp_path / "results.txt", records)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1 + len(records)
    assert lines[0] == HEADER
    for line in lines:
        assert len(line.split(",")) == 19
    assert lines[2].startswith("other,0,0,42.5,")


def test_write_empty_sequence_gives_header_only(tmp_path: Path) -> None:
    out = write_results_csv(tmp_path / "empty.txt", [])
    assert out.read_text(encoding="utf-8") == HEADER + "\n"


def test_unwritable_path_fails(tmp_path: Path) -> None:
    target = tmp_path / "missing_dir" / "results.txt"
    with pytest.raises(ResultsWriteError) as excinfo:
        write_results_csv(target, [_record()])
    assert isinstance(excinfo.value, OSError)
    assert not target.exists()


def test_read_back(tmp_path: Path) -> None:
    records = [_record(), _record("b", 10, 7.25)]
    path = write_results_csv(tmp_path / "r.csv", records)
    assert read_results_csv(path) == records


def test_read_rejects_foreign_header(tmp_path: Path) -> None:
    path = tmp_path / "r.csv"
    path.write_text("planner,cost\nx,1\n", encoding="utf-8")
    with pytest.raises(ParseError):
        read_results_csv(path)


def test_summarize_groups_by_planner_and_holes(tmp_path: Path) -> None:
    records = [
        _record("a", 0, 10.0),
        _record("a", 0, 20.0),
        _record("a", 5, 30.0),
        _record("b", 0, 5.0),
    ]
    rows = summarize(records)
    assert [(r.planner, r.num_holes, r.runs) for r in rows] == [
        ("a", 0, 2),
        ("a", 5, 1),
        ("b", 0, 1),
    ]
    assert rows[0].cost_mean == pytest.approx(15.0)
    assert rows[0].cost_std == pytest.approx(5.0)
    out = write_summary_csv(tmp_path / "summary.csv", rows)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("planner,num_holes,runs,cost_mean")
    assert len(lines) == 4


def test_plots_are_written(tmp_path: Path) -> None:
    from shapely.geometry import Polygon

    records = [_record("a", 0), _record("a", 5), replace(_record("b", 5), total_time=0.9)]
    p1 = plot_time_vs_holes(records, str(tmp_path / "plots" / "time.png"))
    poly = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)], [[(2, 2), (4, 2), (4, 4)]])
    p2 = plot_instance(poly, str(tmp_path / "plots" / "inst.png"), waypoints=[(0, 0), (10, 10)])
    assert Path(p1).stat().st_size > 0
    assert Path(p2).stat().st_size > 0
