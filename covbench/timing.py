"""Hierarchical, resettable wall-clock timers.

A ``TimingContext`` owns a table of labelled timers for one benchmark run.
It is handed explicitly to the planner's ``setup``/``solve`` so nested
sub-timers (e.g. one per sweep line inside ``solve_total``) land in the same
table. Repeated acquisitions of a label accumulate.

Usage::

    timing = TimingContext()
    with timing.timer("solve_total"):
        for line in lines:
            with timing.timer("line_sweeps"):
                ...
    timing.total("line_sweeps")
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Dict, TextIO


@dataclass
class TimerStats:
    """Accumulated measurements of one label."""

    count: int = 0
    total: float = 0.0
    min: float = float("inf")
    max: float = 0.0

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, elapsed: float) -> None:
        self.count += 1
        self.total += elapsed
        self.min = min(self.min, elapsed)
        self.max = max(self.max, elapsed)


class Timer:
    """Scoped timer handle. Starts on creation, stops once.

    A label is only counted once its timer stops; a timer still running is
    not part of ``collect()``. A timer started before ``reset()`` is detached
    and never records into the new table.
    """

    def __init__(self, context: "TimingContext", label: str):
        self._context = context
        self._generation = context._generation
        self.label = label
        self._start = time.perf_counter()
        self.elapsed: float | None = None

    @property
    def running(self) -> bool:
        return self.elapsed is None

    def stop(self) -> float:
        """Stop the timer and record it; later calls return the same value."""
        if self.elapsed is None:
            self.elapsed = time.perf_counter() - self._start
            self._context._record(self.label, self.elapsed, self._generation)
        return self.elapsed

    def __enter__(self) -> "Timer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


class TimingContext:
    """Table of named timers for a single run."""

    def __init__(self) -> None:
        self._stats: Dict[str, TimerStats] = {}
        self._generation = 0

    def reset(self) -> None:
        self._stats.clear()
        self._generation += 1

    def timer(self, label: str) -> Timer:
        return Timer(self, label)

    def _record(self, label: str, elapsed: float, generation: int) -> None:
        if generation != self._generation:
            return
        self._stats.setdefault(label, TimerStats()).add(elapsed)

    def collect(self) -> Dict[str, TimerStats]:
        """Snapshot of all labels recorded since the last reset."""
        return {
            label: TimerStats(s.count, s.total, s.min, s.max) for label, s in self._stats.items()
        }

    def total(self, label: str, default: float = 0.0) -> float:
        stats = self._stats.get(label)
        return stats.total if stats is not None else default

    def count(self, label: str) -> int:
        stats = self._stats.get(label)
        return stats.count if stats is not None else 0

    def format_report(self) -> str:
        if not self._stats:
            return "(no timers)"
        width = max(len(label) for label in self._stats)
        header = f"{'label':<{width}}  {'count':>6}"
        header += "".join(f"  {name:>10}" for name in ("total", "mean", "min", "max"))
        lines = [header]
        for label in sorted(self._stats):
            s = self._stats[label]
            lines.append(
                f"{label:<{width}}  {s.count:>6d}  {s.total:>10.6f}  {s.mean:>10.6f}"
                f"  {s.min:>10.6f}  {s.max:>10.6f}"
            )
        return "\n".join(lines)

    def print(self, stream: TextIO | None = None) -> None:
        out = stream if stream is not None else sys.stdout
        out.write(self.format_report() + "\n")
