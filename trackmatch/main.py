"""Track Match -- command-line entry point and configuration loading."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from trackmatch.utils.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_CONFIG_FILENAME,
    EXIT_INPUT_ERROR,
    EXIT_OK,
    EXIT_REGRESSION,
    FUZZY_MATCH_THRESHOLD,
    MAX_FALSE_NEGATIVE_RATE,
)
from trackmatch.utils.logger import get_logger, setup_logger

DEFAULT_FIXTURE_PATH = Path("tests") / "fixtures" / "eval_cases.json"
DEFAULT_REVIEW_CSV = Path("eval-review.csv")


def validate_config(config: dict) -> list[str]:
    """Validate configuration values and return a list of warnings.

    Checks:
    - fuzzy_threshold is within 0-100
    - max_false_negative_rate is within 0-1
    - trace_terms is a list

    Invalid values are replaced by their defaults in ``config``.

    Args:
        config: Configuration dictionary.

    Returns:
        List of human-readable warning strings. Empty if all checks pass.
    """
    warnings: list[str] = []

    threshold = config.get("fuzzy_threshold", FUZZY_MATCH_THRESHOLD)
    if (
        isinstance(threshold, bool)
        or not isinstance(threshold, (int, float))
        or not (0 <= threshold <= 100)
    ):
        warnings.append(
            f"fuzzy_threshold must be 0-100, got {threshold!r}. "
            f"Using default ({FUZZY_MATCH_THRESHOLD})."
        )
        config["fuzzy_threshold"] = FUZZY_MATCH_THRESHOLD

    max_rate = config.get("max_false_negative_rate", MAX_FALSE_NEGATIVE_RATE)
    if (
        isinstance(max_rate, bool)
        or not isinstance(max_rate, (int, float))
        or not (0 <= max_rate <= 1)
    ):
        warnings.append(
            f"max_false_negative_rate must be 0-1, got {max_rate!r}. "
            f"Using default ({MAX_FALSE_NEGATIVE_RATE})."
        )
        config["max_false_negative_rate"] = MAX_FALSE_NEGATIVE_RATE

    trace_terms = config.get("trace_terms", [])
    if trace_terms is None:
        config["trace_terms"] = []
    elif not isinstance(trace_terms, list):
        warnings.append(f"trace_terms must be a list, got {trace_terms!r}. Tracing disabled.")
        config["trace_terms"] = []
    else:
        config["trace_terms"] = [str(t) for t in trace_terms if t]

    return warnings


def load_config(path: Path | str | None = None) -> dict:
    """Load configuration from config.yaml.

    Args:
        path: Explicit config file. Defaults to ``config/config.yaml`` next
            to the package.

    Returns:
        Configuration dictionary (suitable for ``AppConfig.from_dict()``).
        Empty when the file does not exist.
    """
    config: dict = {}

    config_path = (
        Path(path) if path else Path(__file__).parent.parent / "config" / DEFAULT_CONFIG_FILENAME
    )
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

    return config


def _threshold_arg(value: str) -> float:
    """argparse type for --threshold: a number within 0-100."""
    try:
        threshold = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not (0 <= threshold <= 100):
        raise argparse.ArgumentTypeError(f"must be 0-100, got {value}")
    return threshold


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Find streaming-library tracks that are missing from a local music collection",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    missing_parser = subparsers.add_parser(
        "missing",
        help="List streaming tracks with no local counterpart",
    )
    missing_parser.add_argument(
        "streaming_json",
        type=Path,
        help="Streaming library export (JSON)",
    )
    local_source = missing_parser.add_mutually_exclusive_group(required=True)
    local_source.add_argument(
        "--local-dir",
        type=Path,
        help="Local music directory to scan",
    )
    local_source.add_argument(
        "--local-json",
        type=Path,
        help="Previously exported local collection (JSON)",
    )
    missing_parser.add_argument("--super-genre", help="Only check this super genre")
    missing_parser.add_argument("--genre", help="Only check this genre")
    missing_parser.add_argument("--artist", help="Only check this artist")
    missing_parser.add_argument(
        "--threshold",
        type=_threshold_arg,
        help="Fuzzy match threshold (0-100)",
    )
    missing_parser.add_argument(
        "--trace",
        action="append",
        default=[],
        metavar="TERM",
        help="Log match decisions for tracks whose title/artist contains TERM",
    )
    missing_parser.add_argument(
        "--report-dir",
        type=Path,
        help="Write _missing_report.json/.txt to this directory",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan a local music directory and export it as JSON",
    )
    scan_parser.add_argument("local_dir", type=Path, help="Local music directory")
    scan_parser.add_argument("--output", type=Path, required=True, help="Output JSON path")

    eval_parser = subparsers.add_parser(
        "eval",
        help="Measure matching accuracy on the labeled corpus",
    )
    eval_parser.add_argument(
        "--fixture",
        type=Path,
        default=DEFAULT_FIXTURE_PATH,
        help=f"Eval fixture (default: {DEFAULT_FIXTURE_PATH})",
    )
    eval_parser.add_argument(
        "--max-fnr",
        type=float,
        help="Maximum allowed false-negative rate (0-1)",
    )
    eval_parser.add_argument(
        "--super-genre",
        help="Only evaluate cases of this super genre",
    )
    eval_parser.add_argument(
        "--report-dir",
        type=Path,
        help="Write _eval_report.json/.txt to this directory",
    )

    format_parser = subparsers.add_parser(
        "eval-format",
        help="Convert a raw database export into a draft eval fixture",
    )
    format_parser.add_argument("--input", type=Path, required=True, help="Raw export JSON")
    format_parser.add_argument("--output", type=Path, required=True, help="Fixture JSON to write")

    to_csv_parser = subparsers.add_parser(
        "eval-to-csv",
        help="Export the eval fixture to CSV for review",
    )
    to_csv_parser.add_argument("--input", type=Path, default=DEFAULT_FIXTURE_PATH)
    to_csv_parser.add_argument("--output", type=Path, default=DEFAULT_REVIEW_CSV)

    from_csv_parser = subparsers.add_parser(
        "csv-to-eval",
        help="Merge reviewed CSV labels back into the eval fixture",
    )
    from_csv_parser.add_argument("--csv", type=Path, default=DEFAULT_REVIEW_CSV)
    from_csv_parser.add_argument("--json", type=Path, default=DEFAULT_FIXTURE_PATH)
    from_csv_parser.add_argument(
        "--output",
        type=Path,
        help="Fixture JSON to write (default: overwrite --json)",
    )

    return parser


def _print_lines(lines: list[str]) -> None:
    for line in lines:
        print(line)


def _run_missing(args: argparse.Namespace, config) -> int:
    from trackmatch.core.matcher import TermTraceObserver, match_all
    from trackmatch.core.missing_tracks import (
        describe_filters,
        filter_streaming_tracks,
        missing_from_results,
    )
    from trackmatch.core.report_writer import ReportWriter
    from trackmatch.core.scanner import LocalScanner
    from trackmatch.core.track_loader import load_local_tracks, load_streaming_tracks

    streaming = load_streaming_tracks(args.streaming_json)
    if args.local_dir:
        local = LocalScanner().scan(args.local_dir)
    else:
        local = load_local_tracks(args.local_json)

    trace_terms = args.trace or config.trace_terms
    observer = TermTraceObserver(trace_terms) if trace_terms else None
    threshold = args.threshold if args.threshold is not None else config.fuzzy_threshold

    selected = filter_streaming_tracks(streaming, args.super_genre, args.genre, args.artist)
    results = match_all(selected, local, fuzzy_threshold=threshold, observer=observer)
    missing = missing_from_results(results)

    lines = [
        f"{len(missing)} of {len(selected)} streaming tracks missing locally"
        f"{describe_filters(args.super_genre, args.genre, args.artist)}",
    ]
    lines += [f"  {m.streaming_track.display_label}" for m in missing]
    _print_lines(lines)

    report_dir = args.report_dir or config.report_dir_resolved
    if report_dir:
        ReportWriter.write_missing_report(report_dir, missing, results)
    return EXIT_OK


def _run_scan(args: argparse.Namespace, config) -> int:
    from trackmatch.core.scanner import LocalScanner
    from trackmatch.core.track_loader import save_local_tracks

    tracks = LocalScanner().scan(args.local_dir)
    save_local_tracks(tracks, args.output)
    print(f"Wrote {len(tracks)} local tracks to {args.output}")
    return EXIT_OK


def _run_eval(args: argparse.Namespace, config) -> int:
    from trackmatch.core.eval_fixtures import load_fixture
    from trackmatch.core.evaluation import check_non_regression, format_eval_report, run_evaluation
    from trackmatch.core.report_writer import ReportWriter

    logger = get_logger("main")
    fixture = load_fixture(args.fixture)
    cases = fixture.cases
    if args.super_genre:
        cases = [c for c in cases if c.super_genre == args.super_genre]

    report = run_evaluation(cases, fuzzy_threshold=config.fuzzy_threshold)
    _print_lines(format_eval_report(report, fixture.description))

    report_dir = args.report_dir or config.report_dir_resolved
    if report_dir:
        ReportWriter.write_eval_report(report_dir, report, fixture.description)

    max_rate = args.max_fnr if args.max_fnr is not None else config.max_false_negative_rate
    violations = check_non_regression(report.metrics, max_rate)
    for violation in violations:
        logger.error("Eval regression: %s", violation)
    return EXIT_REGRESSION if violations else EXIT_OK


def _run_eval_format(args: argparse.Namespace, config) -> int:
    from trackmatch.core.eval_fixtures import format_raw_export_file

    fixture = format_raw_export_file(args.input, args.output)
    _print_lines([
        f"Wrote {fixture.total_cases} eval cases to {args.output}",
        f"  {len(fixture.false_negative_cases)} false-negative candidates (need review)",
        f"  {len(fixture.true_missing_cases)} true-missing",
    ])
    return EXIT_OK


def _run_eval_to_csv(args: argparse.Namespace, config) -> int:
    from trackmatch.core.eval_fixtures import export_review_csv, load_fixture

    fixture = load_fixture(args.input)
    rows = export_review_csv(fixture, args.output)
    _print_lines([
        f"Wrote {rows} rows to {args.output}",
        "Editable columns: verdict, failureCategory, notes",
    ])
    return EXIT_OK


def _run_csv_to_eval(args: argparse.Namespace, config) -> int:
    from trackmatch.core.eval_fixtures import load_fixture, merge_review_csv, save_fixture

    fixture = load_fixture(args.json)
    summary = merge_review_csv(fixture, args.csv)
    output = args.output or args.json
    save_fixture(fixture, output)
    _print_lines([
        f"Merged CSV into {output}",
        f"  {summary.updated} cases updated",
        f"  {summary.unchanged} cases unchanged",
    ] + [f"  warning: {w}" for w in summary.warnings])
    return EXIT_OK


_COMMANDS = {
    "missing": _run_missing,
    "scan": _run_scan,
    "eval": _run_eval,
    "eval-format": _run_eval_format,
    "eval-to-csv": _run_eval_to_csv,
    "csv-to-eval": _run_csv_to_eval,
}


def main(argv: list[str] | None = None) -> int:
    """Application entry point. Loads config, sets up logging, and runs a command."""
    from trackmatch.exceptions import TrackMatchError
    from trackmatch.models.config import AppConfig

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_INPUT_ERROR

    raw_config = load_config(args.config)

    # Validate the raw dict first (mutates to fix invalid values)
    config_warnings = validate_config(raw_config)

    # Build typed config from the validated dict
    config = AppConfig.from_dict(raw_config)
    if args.log_level:
        config.log_level = args.log_level

    setup_logger(log_level=config.log_level, log_file=config.log_file)
    logger = get_logger("main")
    logger.debug("%s v%s running %s", APP_NAME, APP_VERSION, args.command)

    for warning in config_warnings:
        logger.warning("Config: %s", warning)

    try:
        return _COMMANDS[args.command](args, config)
    except (TrackMatchError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
