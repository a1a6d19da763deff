"""Command-line front end that drives one analysis end to end.

Pipeline:
1) Load a built-in dataset or a CSV file and log its dataset summary.
2) Fit ``y ~ x`` and log the model summary and residual analysis.
3) Optionally predict the response at one x value.
4) Write ``regression_summary.txt`` and the diagnostic figures.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from . import reporting
from .data_processing import BUILTIN_DATASETS
from .errors import AnalysisError, InsufficientDataError
from .plotting import plot_all
from .session import AnalysisSession

DEFAULT_OUTPUT_DIR = "output"


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for module execution."""
    parser = argparse.ArgumentParser(
        description="Simple linear regression analysis of a two-column selection."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--dataset",
        choices=sorted(BUILTIN_DATASETS),
        help="Built-in sample dataset.",
    )
    source.add_argument("--csv", help="Path to a CSV file with a header row.")
    parser.add_argument("--x", required=True, help="Predictor column name.")
    parser.add_argument("--y", required=True, help="Response column name.")
    parser.add_argument(
        "--predict",
        default=None,
        help="Optional predictor value at which to predict the response.",
    )
    parser.add_argument(
        "--outdir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip writing PNG figures.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO).",
    )
    return parser


def run_analysis(args: argparse.Namespace) -> dict:
    """Run the pipeline for parsed arguments and return the output paths."""
    session = AnalysisSession()
    if args.csv:
        with open(args.csv, "rb") as fh:
            dataset = session.load(fh.read())
    else:
        dataset = session.load(args.dataset)
    logging.info("%s", reporting.dataset_overview_text(dataset))

    session.select(args.x, args.y)
    session.run_regression()

    narrative = session.narrative()
    record = session.summary_record()
    logging.info("\n%s", reporting.model_details_text(record, narrative))
    logging.info("\n%s", reporting.residual_analysis_text(narrative))

    if args.predict is not None:
        logging.info("%s", reporting.prediction_text(session.predict(args.predict)))

    outputs = {"summary": session.export_summary(args.outdir)}
    if not args.no_plots:
        try:
            corr = session.correlation_matrix()
        except InsufficientDataError:
            logging.info("Fewer than 2 numeric columns; skipping correlation matrix")
            corr = None
        outputs.update(plot_all(session.model, corr, args.outdir))
    return outputs


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for running one regression analysis."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    start_time = time.time()
    try:
        outputs = run_analysis(args)
    except (AnalysisError, OSError) as exc:
        logging.error("Analysis failed: %s", exc)
        return 1

    logging.info("Generated output files:")
    for name, path in outputs.items():
        logging.info("  - %s: %s", name, path)
    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
