"""Summarize a benchmark results file.

Reads the comma-separated results written by ``main.py`` and produces:

1) ``summary.csv`` with per (planner, num_holes) means and deviations.
2) Mean total time and mean cost vs number of holes, one line per planner.

Usage:
    python scripts/summarize_results.py /tmp/coverage_results.txt --out figures/run1
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from covbench.experiments.aggregate import summarize, write_summary_csv  # noqa: E402
from covbench.experiments.results import read_results_csv  # noqa: E402
from covbench.visualization import plot_time_vs_holes  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("results", type=Path)
    ap.add_argument("--out", type=Path, default=Path("figures"))
    args = ap.parse_args(argv)

    records = read_results_csv(args.results)
    if not records:
        print(f"[Summary] No rows in {args.results}")
        return 1
    args.out.mkdir(parents=True, exist_ok=True)
    write_summary_csv(args.out / "summary.csv", summarize(records))
    plot_time_vs_holes(records, os.path.join(args.out, "total_time_vs_holes.png"))
    plot_time_vs_holes(records, os.path.join(args.out, "cost_vs_holes.png"), metric="cost")
    print(f"[Summary] {len(records)} rows -> {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
