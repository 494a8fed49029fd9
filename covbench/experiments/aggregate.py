from __future__ import annotations

import csv
import logging
from collections import defaultdict
from dataclasses import astuple, dataclass, fields
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import numpy as np

from covbench.models import ResultRecord

logger = logging.getLogger("covbench.aggregate")


@dataclass(frozen=True)
class SummaryRow:
    """Statistics of all runs of one planner in one obstacle bin."""

    planner: str
    num_holes: int
    runs: int
    cost_mean: float
    cost_std: float
    num_hole_vertices_mean: float
    total_time_mean: float
    total_time_std: float
    total_time_setup_mean: float
    total_time_solve_mean: float


def summarize(records: Iterable[ResultRecord]) -> List[SummaryRow]:
    groups: Dict[Tuple[str, int], List[ResultRecord]] = defaultdict(list)
    for r in records:
        groups[(r.planner, r.num_holes)].append(r)

    rows: List[SummaryRow] = []
    for (planner, num_holes), group in sorted(groups.items()):
        cost = np.array([r.cost for r in group], dtype=float)
        total = np.array([r.total_time for r in group], dtype=float)
        rows.append(
            SummaryRow(
                planner=planner,
                num_holes=num_holes,
                runs=len(group),
                cost_mean=float(cost.mean()),
                cost_std=float(cost.std()),
                num_hole_vertices_mean=float(np.mean([r.num_hole_vertices for r in group])),
                total_time_mean=float(total.mean()),
                total_time_std=float(total.std()),
                total_time_setup_mean=float(np.mean([r.total_time_setup for r in group])),
                total_time_solve_mean=float(np.mean([r.total_time_solve for r in group])),
            )
        )
    return rows


def write_summary_csv(path: str | Path, rows: Iterable[SummaryRow]) -> Path:
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow([fld.name for fld in fields(SummaryRow)])
        for row in rows:
            writer.writerow(astuple(row))
    logger.info("Summary written: %s", path)
    return path
