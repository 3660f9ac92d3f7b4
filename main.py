"""
Mileage Dashboard - command line entry point

Validates a running log CSV and prints the dashboard summary:

1. Check file acceptance (type, size, emptiness)
2. Parse and validate rows
3. Report validation errors and data-quality warnings
4. Aggregate overall metrics, per-person stats and the chart series
5. Optionally export summary + parse result as JSON

Usage:
    python main.py --file <filepath> [--output <json path>] [--strict]

Examples:
    python main.py --file runs.csv
    python main.py --file runs.csv --output summary.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from mileage.aggregation import DashboardSummary, generate_dashboard_summary
from mileage.config import validate_config
from mileage.file_loader import validate_file
from mileage.ingestion import ParseResult, file_error, parse_csv_file
from mileage.logger import get_logger
from mileage.metrics import format_miles, format_number
from mileage.validator import FILE_LEVEL_ROW, format_errors

logger = get_logger(__name__)


def print_summary(summary: DashboardSummary) -> None:
    overall = summary.overall_metrics
    print("=" * 60)
    print("MILEAGE SUMMARY")
    print("=" * 60)
    print(f"Runs:      {overall.run_count}")
    print(f"Total:     {format_miles(overall.total_distance)}")
    print(f"Average:   {format_miles(overall.average_distance)}")
    print(f"Shortest:  {format_miles(overall.min_distance)}")
    print(f"Longest:   {format_miles(overall.max_distance)}")
    if overall.date_range.start and overall.date_range.end:
        print(f"Dates:     {overall.date_range.start:%Y-%m-%d} to {overall.date_range.end:%Y-%m-%d}")

    if summary.person_stats:
        print("\nBy person:")
        for stats in summary.person_stats:
            print(
                f"  {stats.person:<20} {format_miles(stats.metrics.total_distance):>12} "
                f"{stats.metrics.run_count:>4} runs  {format_number(stats.percentage_of_total, 1)}%"
            )

    print(f"\nChart points: {len(summary.chart_data)}")


def export_json(path: Path, result: ParseResult, summary: DashboardSummary) -> None:
    payload = {"parse_result": result.to_dict(), "summary": summary.to_dict()}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info(f"Wrote {path}")


def run_pipeline(filepath: Path | str, output_path: Path | str | None = None) -> tuple[ParseResult, DashboardSummary | None]:
    """
    Validate, parse and summarise one file.

    Returns:
        (ParseResult, DashboardSummary) or (ParseResult, None) when the file
        was rejected before or at header validation.
    """
    is_valid, config_errors = validate_config()
    if not is_valid:
        for error in config_errors:
            logger.error(f"Configuration error: {error}")

    filepath = Path(filepath)
    check = validate_file(filepath)
    if not check.valid:
        logger.error(f"{filepath.name}: {check.error}")
        return file_error(filepath.name, check.error or "rejected"), None

    result = parse_csv_file(filepath)

    for line in format_errors(result.errors):
        logger.warning(line)
    for warning in result.warnings:
        logger.info(f"Warning: {warning}")

    if any(e.source_row_index == FILE_LEVEL_ROW for e in result.errors):
        return result, None

    summary = generate_dashboard_summary(result.data)
    if output_path:
        export_json(Path(output_path), result, summary)
    return result, summary


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Mileage Dashboard - validate a running log and summarise it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --file runs.csv                        # Print summary
  python main.py --file runs.csv --output summary.json  # Also export JSON
  python main.py --file runs.csv --strict               # Fail on any row error
        """,
    )
    parser.add_argument("--file", "-f", type=str, required=True, help="Path to the CSV/TXT running log")
    parser.add_argument("--output", "-o", type=str, default=None, help="Optional JSON export path")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any validation error is reported",
    )
    args = parser.parse_args()

    result, summary = run_pipeline(args.file, args.output)
    if summary is None:
        return 1

    print_summary(summary)
    if args.strict and not result.success:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
