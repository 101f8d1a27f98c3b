#!/usr/bin/env python3
"""
Benchmark CLI for measuring how exactly LLMs follow word count instructions.

Each selected model is asked to write exactly N words about a topic, for every
target word count, several times. The report ranks models by how often they
hit the target exactly and by how far they miss on average.

Examples:
    # Standard matrix against two models
    python benchmark.py --models gpt-5-nano claude-3-5-haiku --preset standard

    # Custom word counts, 5 trials each, low temperature
    python benchmark.py -m gpt-4o --word-counts 10,40,120 --trials 5 --temperature 0.2

    # Offline run against the mock model
    python benchmark.py --dry-run

    # Re-print and re-plot a saved report
    python benchmark.py --report-only benchmark_results/word_count_benchmark_2025-01-01_120000.json --plots
"""

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from wordbench.catalog import ModelCatalog, UnknownModel
from wordbench.benchmark import (
    BenchmarkConfig,
    BenchmarkEngine,
    BenchmarkPlotter,
    BenchmarkReport,
    InvalidConfiguration,
    ProgressEvent,
    ResultsAggregator,
    WORD_COUNT_PRESETS,
)
from wordbench.benchmark.config import parse_word_counts

DEFAULT_MODELS = ["gpt-5-nano", "claude-3-5-haiku"]

# Malformed JSON (JSONDecodeError is a ValueError) or a payload of the wrong shape
LOAD_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


def setup_logging(verbose: bool, log_file: str | None = None) -> None:
    """Configure logging."""
    level = logging.INFO if verbose else logging.WARNING

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def word_counts_arg(value: str) -> tuple[int, ...]:
    """Parse --word-counts, e.g. "10,25,50"."""
    try:
        counts = parse_word_counts(value)
    except InvalidConfiguration as e:
        raise argparse.ArgumentTypeError(str(e))
    if not counts:
        raise argparse.ArgumentTypeError("At least one word count is required")
    return counts


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="LLM Word Count Adherence Benchmark - Test which models follow exact word counts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Word count presets:
  quick           10, 25, 50
  standard        10, 25, 50, 100, 200
  comprehensive   10, 25, 50, 75, 100, 150, 200, 300
        """,
    )

    # Model selection
    parser.add_argument(
        "--models",
        "-m",
        type=str,
        nargs="+",
        help=f"Catalog identifiers of the models to benchmark (default: {' '.join(DEFAULT_MODELS)})",
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List the models in the catalog and exit",
    )

    # Matrix settings
    matrix = parser.add_mutually_exclusive_group()
    matrix.add_argument(
        "--preset",
        type=str,
        choices=sorted(WORD_COUNT_PRESETS),
        default=None,
        help="Predefined word count matrix (default: standard)",
    )
    matrix.add_argument(
        "--word-counts",
        "-w",
        type=word_counts_arg,
        default=None,
        help="Comma-separated target word counts, each between 5 and 500 (e.g., 10,25,50)",
    )
    parser.add_argument(
        "--trials",
        "-t",
        type=int,
        default=10,
        help="Trials per model per word count, 1-50 (default: 10)",
    )
    parser.add_argument(
        "--temperature",
        type=float,
        default=0.7,
        help="Sampling temperature, 0.0-1.0 (default: 0.7)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible topic selection",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Benchmark only the offline mock model (no API calls)",
    )

    # Output settings
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="benchmark_results",
        help="Output directory for results (default: benchmark_results)",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Don't save detailed results to file",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Also write a per-trial CSV next to the JSON report",
    )
    parser.add_argument(
        "--plots",
        action="store_true",
        help="Generate plots (requires matplotlib)",
    )
    parser.add_argument(
        "--report-only",
        type=str,
        metavar="REPORT",
        help="Print (and optionally plot) an existing JSON report without running anything",
    )

    # Configuration file
    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON configuration file",
    )
    parser.add_argument(
        "--save-config",
        type=str,
        help="Save configuration to JSON file and exit",
    )

    # Logging
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write log output to this file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress per-trial progress output",
    )

    return parser


def build_config_from_args(args: argparse.Namespace) -> BenchmarkConfig:
    """Build BenchmarkConfig from command line arguments."""
    if args.dry_run:
        models = ["mock"]
    else:
        models = args.models or DEFAULT_MODELS

    if args.word_counts:
        word_counts = args.word_counts
    else:
        word_counts = WORD_COUNT_PRESETS[args.preset or "standard"]

    return BenchmarkConfig(
        models=tuple(models),
        word_counts=tuple(word_counts),
        trials_per_word_count=args.trials,
        temperature=args.temperature,
        seed=args.seed,
    )


def report_filename(timestamp: datetime | None = None) -> str:
    """Default report file name, e.g. word_count_benchmark_2025-01-01_120000.json."""
    timestamp = timestamp or datetime.now()
    return f"word_count_benchmark_{timestamp.strftime('%Y-%m-%d_%H%M%S')}.json"


def output_report(report: BenchmarkReport, output_dir: Path, save: bool, csv: bool, plots: bool) -> None:
    """Print, save and plot a finished report."""
    aggregator = ResultsAggregator(report)
    aggregator.print_summary()

    if save:
        report_path = aggregator.save_report(output_dir / report_filename())
        print(f"\nResults saved to: {report_path}")
        if csv:
            csv_path = aggregator.generate_csv(report_path.with_suffix(".csv"))
            print(f"CSV saved to: {csv_path}")

    if plots:
        try:
            plotter = BenchmarkPlotter(output_dir / "plots")
            plotter.generate_all_plots(report)
            print(f"Plots saved to: {output_dir / 'plots'}")
        except ImportError:
            print("\nWarning: matplotlib not installed. Skipping plot generation.")
            print("Install with: pip install matplotlib")


def run_benchmark(
    config: BenchmarkConfig, catalog: ModelCatalog, show_progress: bool = True
) -> BenchmarkReport:
    """Run the benchmark suite."""
    print("=" * 60)
    print("LLM WORD COUNT ADHERENCE BENCHMARK")
    print("=" * 60)
    print(f"Models: {', '.join(config.models)}")
    print(f"Word counts: {', '.join(str(c) for c in config.word_counts)}")
    print(f"Trials per model per word count: {config.trials_per_word_count}")
    print(f"Temperature: {config.temperature}")
    print(f"Total trials: {config.total_trials}")
    print("=" * 60)

    def progress_callback(event: ProgressEvent) -> None:
        pct = event.current / event.total * 100 if event.total > 0 else 0
        status = f"{event.trial.actual_words} words" if event.trial.succeeded else "error"
        print(
            f"[{pct:5.1f}%] {event.model} ({event.target_words} words, "
            f"trial {event.trial_number}/{config.trials_per_word_count}): {status}"
        )

    engine = BenchmarkEngine(
        catalog=catalog, progress_callback=progress_callback if show_progress else None
    )
    return engine.execute(config)


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    catalog = ModelCatalog()

    if args.list_models:
        for identifier in catalog.identifiers():
            print(f"{identifier:<20} {catalog.resolve(identifier).full_name}")
        return 0

    setup_logging(args.verbose and not args.quiet, args.log_file)

    if args.report_only:
        report_path = Path(args.report_only)
        if not report_path.exists():
            print(f"Error: Report not found: {report_path}", file=sys.stderr)
            return 1
        try:
            report = BenchmarkReport.load(report_path)
        except LOAD_ERRORS as e:
            print(f"Error: Invalid report file {report_path}: {e!r}", file=sys.stderr)
            return 1
        output_report(report, Path(args.output), save=False, csv=False, plots=args.plots)
        return 0

    # Handle config file
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        try:
            config = BenchmarkConfig.load(config_path)
        except LOAD_ERRORS as e:
            print(f"Error: Invalid config file {config_path}: {e!r}", file=sys.stderr)
            return 1
        if args.seed is not None:
            config = replace(config, seed=args.seed)
    else:
        config = build_config_from_args(args)

    try:
        config.validate(catalog)
    except (InvalidConfiguration, UnknownModel) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Save config if requested
    if args.save_config:
        config.save(args.save_config)
        print(f"Configuration saved to: {args.save_config}")
        return 0

    try:
        report = run_benchmark(config, catalog, show_progress=not args.quiet)
    except ValueError as e:
        # Missing API keys surface here, before any trial runs
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output_report(
        report,
        Path(args.output),
        save=not args.no_save,
        csv=args.csv,
        plots=args.plots,
    )

    if not report.complete:
        print("\nBenchmark interrupted. Only completed word counts were reported.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
