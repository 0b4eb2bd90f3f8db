#!/usr/bin/env python3
"""CLI script to build farm analytics reports.

Reports are built from a JSON/YAML snapshot of farm records or from the farm
records API, for an inclusive date window.

Usage:
    # Yield analysis for the last 30 days, as JSON
    python scripts/build_report.py --kind yield

    # Financial report as CSV for a given window
    python scripts/build_report.py --kind financial --format csv \\
        --start 2024-01-01 --end 2024-12-31

    # Combined printable report written to a file
    python scripts/build_report.py --kind all --format pdf --output reports/

    # Every report kind from a specific snapshot
    python scripts/build_report.py --kind every --snapshot data/farm_snapshot.json
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from farm_reports.common.config import AppConfig, load_config
from farm_reports.common.logging import get_logger, setup_logging
from farm_reports.common.time_utils import parse_datetime, utc_now
from farm_reports.reporting import (
    ReportingConfig,
    ReportingError,
    ReportOrchestrator,
)
from farm_reports.sources import (
    ApiActivityReader,
    ApiEquipmentReader,
    ApiFieldReader,
    ApiTaskReader,
    FarmApiClient,
    load_snapshot,
)

logger = get_logger(__name__)

KIND_CHOICES = ["yield", "financial", "seasonal", "performance", "resources", "custom", "all", "every"]


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Build farm analytics reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--config",
        type=str,
        default="configs/dev.yaml",
        help="Path to configuration file (default: configs/dev.yaml)",
    )

    parser.add_argument(
        "--snapshot",
        type=str,
        help="Snapshot file to read records from (overrides config)",
    )

    parser.add_argument(
        "--kind",
        choices=KIND_CHOICES,
        default="yield",
        help="Report kind; 'all' is the combined export set, 'every' builds all kinds",
    )

    parser.add_argument(
        "--format",
        choices=["json", "csv", "pdf"],
        default="json",
        help="Output format (default: json)",
    )

    parser.add_argument(
        "--start",
        type=str,
        help="Window start date (YYYY-MM-DD, default: 30 days before --end)",
    )

    parser.add_argument(
        "--end",
        type=str,
        help="Window end date (YYYY-MM-DD, default: now)",
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Directory to write the export to (default: print to stdout)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


def resolve_window(start_arg: str | None, end_arg: str | None) -> tuple[datetime, datetime]:
    """Resolve the reporting window from CLI arguments.

    An end date covers the whole day.

    Raises:
        ValueError: On malformed dates or start after end.
    """
    if end_arg:
        end = parse_datetime(end_arg)
        if end is None:
            raise ValueError(f"Invalid end date: {end_arg}")
        if len(end_arg) == 10:
            end = end + timedelta(days=1) - timedelta(microseconds=1)
    else:
        end = utc_now()

    if start_arg:
        start = parse_datetime(start_arg)
        if start is None:
            raise ValueError(f"Invalid start date: {start_arg}")
    else:
        start = end - timedelta(days=30)

    if start > end:
        raise ValueError("Start date must not be after end date")
    return start, end


async def run(args: argparse.Namespace, config: AppConfig) -> str:
    """Build the requested report and return its serialized text."""
    start, end = resolve_window(args.start, args.end)
    reporting_config = ReportingConfig.from_dict(config.reporting)

    if config.sources.backend == "api" and not args.snapshot:
        async with FarmApiClient(config.farm_api) as client:
            orchestrator = ReportOrchestrator(
                fields=ApiFieldReader(client),
                tasks=ApiTaskReader(client),
                activities=ApiActivityReader(client),
                equipment=ApiEquipmentReader(client, fuel_price=reporting_config.fuel_price),
                config=reporting_config,
            )
            return await produce(orchestrator, args, start, end)

    data = load_snapshot(args.snapshot or config.sources.snapshot_path)
    orchestrator = ReportOrchestrator(
        fields=data.field_reader(),
        tasks=data.task_reader(),
        activities=data.activity_reader(),
        equipment=data.equipment_reader(fuel_price=reporting_config.fuel_price),
        config=reporting_config,
    )
    return await produce(orchestrator, args, start, end)


async def produce(
    orchestrator: ReportOrchestrator,
    args: argparse.Namespace,
    start: datetime,
    end: datetime,
) -> str:
    """Build and serialize, writing a file when --output is given."""
    if args.format == "json":
        if args.kind == "every":
            reports = await orchestrator.get_all_reports(start, end)
            payload = {kind.value: report.to_dict() for kind, report in reports.items()}
        elif args.kind == "all":
            payload = (await orchestrator.get_combined_report(start, end)).to_dict()
        else:
            payload = (await orchestrator.get_report(args.kind, start, end)).to_dict()
        content = json.dumps(payload, indent=2, default=str)
        filename = f"farm_{args.kind}_report_{end.date().isoformat()}.json"
    else:
        kind = "all" if args.kind == "every" else args.kind
        output = await orchestrator.export_report(kind, args.format, start, end)
        content, filename = output.content, output.filename

    if args.output:
        output_dir = Path(args.output)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / filename
        path.write_text(content)
        logger.info("report_written", path=str(path))
        return f"Report written: {path}"
    return content


def main() -> int:
    """Main entry point."""
    args = parse_args()

    config_path = Path(args.config)
    config = load_config(config_path) if config_path.exists() else AppConfig()
    if args.verbose:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)

    logger.info("report_cli_starting", kind=args.kind, format=args.format)

    try:
        print(asyncio.run(run(args, config)))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (ReportingError, FileNotFoundError) as e:
        logger.error("report_cli_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("report_cli_complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
