"""Exception types raised by the benchmark harness.

Each error also derives from the closest builtin so callers that only know
about ``FileNotFoundError`` / ``ValueError`` / ``OSError`` keep working.
"""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for all harness errors."""


class InstanceNotFoundError(BenchmarkError, FileNotFoundError):
    """Instance file (or corpus entry) does not exist."""


class ParseError(BenchmarkError, ValueError):
    """Instance file is malformed (missing section, field or bad value)."""


class InsufficientVerticesError(ParseError):
    """A hull or hole boundary has fewer than three points."""


class BooleanOperationError(BenchmarkError, ValueError):
    """Hole subtraction produced an empty or ambiguous (multi-region) result."""


class PlannerSetupError(BenchmarkError, RuntimeError):
    """Planner did not report itself initialized after setup."""


class PlannerSolveError(BenchmarkError, RuntimeError):
    """Planner could not produce a coverage path."""


class ResultsWriteError(BenchmarkError, OSError):
    """Results file could not be opened or written."""


class InstanceReadError(BenchmarkError, OSError):
    """Instance path exists but cannot be read (directory, permissions)."""
