#!/usr/bin/env python3
"""Coverage planner benchmark over the polygon-with-holes corpus.

Usage:
    python main.py --config config.yaml
    python main.py --config config.yaml --results /tmp/run.csv
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

import yaml

from covbench.config import BenchmarkConfig, load_config
from covbench.errors import BenchmarkError, ResultsWriteError
from covbench.experiments.aggregate import summarize, write_summary_csv
from covbench.experiments.results import write_results_csv
from covbench.experiments.runner import run_benchmark
from covbench.loader import load_corpus
from covbench.matrix import ExperimentMatrix
from covbench.visualization import plot_instance, plot_time_vs_holes

logger = logging.getLogger("covbench")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def run(config: BenchmarkConfig) -> int:
    inst = config.instances
    matrix = ExperimentMatrix(inst.max_obstacles, inst.step, inst.replicates, inst.extension)
    try:
        root = inst.resolve_root()
    except ValueError as e:
        logger.error("%s", e)
        return 1

    # Fail-fast: one broken instance aborts the whole batch before any planner runs
    try:
        corpus = load_corpus(
            root,
            matrix,
            map_scale=inst.map_scale,
            multi_region_policy=inst.multi_region_policy,
            grid_size=inst.grid_size,
        )
    except BenchmarkError as e:
        logger.error("Failed to load instance corpus: %s", e)
        return 1

    try:
        results = run_benchmark(corpus, config)
    except (BenchmarkError, ValueError) as e:
        logger.error("Benchmark aborted: %s", e)
        return 1

    try:
        write_results_csv(config.results_file, results)
    except ResultsWriteError as e:
        logger.error("%s", e)
        return 1

    if config.summary_file:
        write_summary_csv(config.summary_file, summarize(results))
    if config.plots_dir:
        plot_time_vs_holes(results, os.path.join(config.plots_dir, "total_time_vs_holes.png"))
        plot_time_vs_holes(
            results, os.path.join(config.plots_dir, "cost_vs_holes.png"), metric="cost"
        )
        first_of_bin = {}
        for coord in corpus:
            first_of_bin.setdefault(coord.obstacle_bin, coord)
        for obstacle_bin, coord in first_of_bin.items():
            plot_instance(
                corpus[coord],
                os.path.join(
                    config.plots_dir, f"instance_{obstacle_bin}_{coord.file_stem}.png"
                ),
            )
    logger.info("Benchmark completed: %d rows", len(results))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Coverage planner benchmark (config driven)")
    parser.add_argument("--config", default="config.yaml", help="Path to YAML config file")
    parser.add_argument("--results", help="Override output.results_file")
    args = parser.parse_args(argv)

    if not os.path.isfile(args.config):
        raise FileNotFoundError(f"Config file not found: {args.config}")
    try:
        config = load_config(args.config)
    except (ValueError, yaml.YAMLError) as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error("Invalid config %s: %s", args.config, e)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO), format=LOG_FORMAT
    )
    if args.results:
        config = replace(config, results_file=args.results)
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
