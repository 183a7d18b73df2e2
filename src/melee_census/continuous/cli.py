#!/usr/bin/env python
"""
Command-line interface for the monthly start.gg harvester.

Usage:
    melee-census [API_KEY] [options]
    python -m melee_census.continuous.cli [API_KEY] [options]

Examples:
    # Resume from results.csv and backfill up to last month
    melee-census 0123456789abcdef

    # Keep going when a single tournament fails
    melee-census 0123456789abcdef --failure-policy skip

    # Custom locations
    melee-census 0123456789abcdef --results data/results.csv --output-dir data/tournaments
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from melee_census.continuous.manager import MonthlyHarvester
from melee_census.core.config import (
    ExclusionPolicy,
    FailurePolicy,
    HarvestConfig,
)
from melee_census.core.constants import DEFAULT_OUTPUT_DIR, DEFAULT_RESULTS_PATH
from melee_census.core.errors import HarvestError
from melee_census.core.logging import setup_logging
from melee_census.core.sentry import init_sentry

logger = logging.getLogger("melee_census.continuous.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="melee-census",
        description="Backfill monthly start.gg Melee data completeness statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "api_key",
        nargs="?",
        metavar="API_KEY",
        help="start.gg API key",
    )
    parser.add_argument(
        "--results",
        type=Path,
        default=Path(DEFAULT_RESULTS_PATH),
        help=f"Summary log to resume from and append to (default: {DEFAULT_RESULTS_PATH})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(DEFAULT_OUTPUT_DIR),
        help=f"Directory for raw snapshots (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--failure-policy",
        choices=[p.value for p in FailurePolicy],
        default=FailurePolicy.ABORT.value,
        help="abort the run or skip the tournament when a fetch fails (default: abort)",
    )
    parser.add_argument(
        "--exclude-slug",
        action="append",
        default=[],
        metavar="SLUG",
        help="Additional tournament slug to ignore (repeatable)",
    )
    parser.add_argument(
        "--exclude-owner",
        action="append",
        type=int,
        default=[],
        metavar="OWNER_ID",
        help="Additional tournament owner id to ignore (repeatable)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: none)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> HarvestConfig:
    return HarvestConfig(
        api_key=args.api_key,
        results_path=args.results,
        output_dir=args.output_dir,
        exclusions=ExclusionPolicy().extended(
            slugs=args.exclude_slug, owner_ids=args.exclude_owner
        ),
        failure_policy=FailurePolicy(args.failure_policy),
        timeout=args.timeout,
        show_progress=not args.no_progress,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the harvester CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.api_key:
        parser.print_usage()
        return 0

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )
    init_sentry(context="melee_census")

    harvester = MonthlyHarvester(config_from_args(args))
    try:
        harvester.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except HarvestError as e:
        logger.error(f"Harvest aborted: {e}", exc_info=True)
        return 1

    if harvester.skipped:
        logger.warning(
            f"Skipped {len(harvester.skipped)} tournaments: "
            f"{', '.join(harvester.skipped)}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
