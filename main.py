#!/usr/bin/env python3
"""
Main script for running the example titration simulations.
"""

# Pipeline overview:
# 1) Build each example titration from the catalog (acid, base, indicator).
# 2) Simulate the curve from 0 mL to twice the equivalence volume.
# 3) Check each curve: derivative inflections, half-equivalence pH = pKa and
#    per-stage Henderson-Hasselbalch pKa recovery.
# 4) Export curves, step logs, summary and diagnostics tables, and figures.

import argparse
import logging
import os
import sys
import time
import warnings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("titration_simulation.log", mode="w"),
    ],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from burette.analysis import analyze_result
from burette.catalog import EXAMPLE_TITRATIONS, get_example
from burette.constants import DEFAULT_STEP_SIZE
from burette.output import format_ph, save_diagnostics_to_csv, save_results_to_csv
from burette.plotting import plot_titration_curves
from burette.simulation import simulate_titration


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Simulate acid-base titration curves.")
    parser.add_argument("--outdir", default="output", help="Directory for CSV and figure output.")
    parser.add_argument(
        "--step-size",
        type=float,
        default=DEFAULT_STEP_SIZE,
        help="Titrant increment between samples, mL.",
    )
    parser.add_argument(
        "--example",
        default=None,
        help="Name or index of a single example titration to run.",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main execution function with step-by-step logging."""
    args = parse_args(argv)

    start_time = time.time()
    logging.info("Initializing titration simulation pipeline")

    if args.example is None:
        examples = list(EXAMPLE_TITRATIONS)
    else:
        key = int(args.example) if args.example.isdigit() else args.example
        try:
            examples = [get_example(key)]
        except KeyError as exc:
            logging.error("%s", exc)
            return 1
    logging.info("Configured %d example titrations", len(examples))

    results = {}
    analyses = {}
    step_start = time.time()
    for example in examples:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = simulate_titration(
                example.acid, example.base, example.indicator, args.step_size
            )
        for warning in caught:
            logging.warning("%s: %s", example.name, warning.message)

        results[example.name] = result
        logging.info(
            "%s: %d points, equivalence at %.2f mL (pH %s), half-equivalence pH %s",
            example.name,
            len(result.points),
            result.equivalence_point.volume,
            format_ph(result.equivalence_point.ph),
            format_ph(result.half_equivalence_point.ph)
            if result.half_equivalence_point
            else "n/a",
        )

        try:
            analyses[example.name] = analyze_result(result, example.acid)
        except ValueError as exc:
            logging.warning("%s: curve diagnostics skipped (%s)", example.name, exc)
    step_duration = time.time() - step_start
    logging.info("Simulation and diagnostics completed in %.2f seconds", step_duration)

    if not results:
        logging.error("No titrations were simulated. Terminating execution.")
        return 1

    output_dir = args.outdir
    os.makedirs(output_dir, exist_ok=True)
    logging.info("Output directory ensured: %s", output_dir)

    step_start = time.time()
    csv_paths = save_results_to_csv(results, output_dir)
    diagnostics_path = save_diagnostics_to_csv(analyses, output_dir) if analyses else None
    step_duration = time.time() - step_start
    logging.info("CSV export completed in %.2f seconds", step_duration)

    step_start = time.time()
    figure_paths = plot_titration_curves(results, output_dir)
    step_duration = time.time() - step_start
    logging.info(
        "Generated %d titration curve figures in %.2f seconds",
        len(figure_paths),
        step_duration,
    )

    total_duration = time.time() - start_time
    logging.info("Total execution time: %.2f seconds", total_duration)

    logging.info("Simulation pipeline completed successfully")
    logging.info("Generated output files:")
    for path in csv_paths:
        logging.info("  - %s", path)
    if diagnostics_path:
        logging.info("  - Diagnostics summary: %s", diagnostics_path)
    for path in figure_paths:
        logging.info("  - Titration curve: %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
