"""Pytest configuration, instance-file helpers & custom summary hook.

Also ensures the project root is on sys.path so 'import covbench.*' and
'import main' work without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest
import yaml

# Ensure project root is on sys.path so 'import covbench.*' works
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

RawRing = Sequence[tuple[float, float]]


def square(x0: float, y0: float, size: float) -> list[tuple[float, float]]:
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


def instance_doc(hull: RawRing, holes: Sequence[RawRing] = ()) -> dict:
    def ring(points: RawRing) -> dict:
        return {"points": [{"x": x, "y": y} for x, y in points]}

    return {"hull": ring(hull), "holes": [ring(h) for h in holes]}


def write_instance(path: Path, hull: RawRing, holes: Sequence[RawRing] = ()) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(instance_doc(hull, holes)), encoding="utf-8")
    return path


def row_of_holes(count: int) -> list[list[tuple[float, float]]]:
    """``count`` (<= 11) disjoint 40x40 squares in a row inside a 1200x1200 hull."""
    return [square(60 + 100 * i, 500, 40) for i in range(count)]


def build_corpus_dir(
    root: Path, bins: Sequence[int], replicates: int, hull_size: float = 1200
) -> Path:
    """Write ``<root>/<bin>/<0000>.yaml`` files with ``bin`` holes each."""
    for obstacle_bin in bins:
        for rep in range(replicates):
            write_instance(
                root / str(obstacle_bin) / f"{rep:04d}.yaml",
                square(0, 0, hull_size),
                row_of_holes(obstacle_bin),
            )
    return root


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    return build_corpus_dir(tmp_path / "pwh_instances", bins=(0, 5), replicates=2)


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    collected = terminalreporter._numcollected  # type: ignore[attr-defined]
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        "Collected: "
        f"{collected} | Passed: {passed} | Failed: {failed} | "
        f"Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
