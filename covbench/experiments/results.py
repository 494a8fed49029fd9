"""Results file: one header row plus one comma-separated row per run.

Columns come from ``ResultRecord`` field order so header and rows cannot
drift apart. Values are numbers or plain identifiers, so rows are written
without quoting.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import fields
from pathlib import Path
from typing import Iterable, List

from covbench.errors import ParseError, ResultsWriteError
from covbench.models import ResultRecord

logger = logging.getLogger("covbench.results")

RESULT_COLUMNS = ResultRecord.column_names()


def write_results_csv(path: str | Path, records: Iterable[ResultRecord]) -> Path:
    path = Path(path)
    logger.info("Saving results to: %s", path)
    try:
        f = open(path, "w", newline="", encoding="utf-8")
    except OSError as e:
        raise ResultsWriteError(f"cannot open results file {path}: {e}") from e
    with f:
        writer = csv.writer(f, quoting=csv.QUOTE_NONE, lineterminator="\n")
        writer.writerow(RESULT_COLUMNS)
        count = 0
        for record in records:
            writer.writerow(record.as_row())
            count += 1
    logger.info("Wrote %d result rows", count)
    return path


def read_results_csv(path: str | Path) -> List[ResultRecord]:
    """Parse a results file written by ``write_results_csv``."""
    types = {f.name: f.type for f in fields(ResultRecord)}
    records: List[ResultRecord] = []
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if tuple(reader.fieldnames or ()) != RESULT_COLUMNS:
            raise ParseError(f"{path}: unexpected header {reader.fieldnames}")
        for line_no, row in enumerate(reader, start=2):
            try:
                values = {}
                for name in RESULT_COLUMNS:
                    kind = types[name]
                    if kind == "int":
                        values[name] = int(row[name])
                    elif kind == "float":
                        values[name] = float(row[name])
                    else:
                        values[name] = row[name]
            except (TypeError, ValueError) as e:
                raise ParseError(f"{path}:{line_no}: {e}") from e
            records.append(ResultRecord(**values))
    return records
