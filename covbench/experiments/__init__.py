"""Benchmark execution: per-run runner, batch loop, result files and summaries."""
