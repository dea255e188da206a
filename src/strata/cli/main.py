"""
strata CLI

Usage:
    strata <preview|deploy|destroy> [environment] [--scope LAYERS] [--regions REGIONS]

The environment falls back to STRATA_ENVIRONMENT. Layers run in registry
order, or in reverse for destroy.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from strata.cli.ux import error, header, info, print_run_summary, success, warning
from strata.config import Settings, get_settings
from strata.core.errors import (
    ExitCode,
    StrataError,
    format_error_message,
    main_with_error_handling,
)
from strata.logging import configure_logging
from strata.orchestration import ExecutionContext, Orchestrator
from strata.orchestration.context import split_csv
from strata.runtime import RUNTIMES, create_runtime


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strata",
        description="Provision layered infrastructure stacks",
    )
    parser.add_argument("action", help="preview, deploy or destroy")
    parser.add_argument(
        "environment",
        nargs="?",
        help="Target environment (defaults to STRATA_ENVIRONMENT)",
    )
    parser.add_argument("--scope", help="Comma-separated layer names to run (default: all)")
    parser.add_argument(
        "--regions",
        help="Comma-separated region codes (default: the supported region list)",
    )
    parser.add_argument(
        "--runtime",
        choices=RUNTIMES,
        default="pulumi",
        help="Stack runtime to drive (default: pulumi)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


@main_with_error_handling()
def run_command(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(
        logging.DEBUG if args.verbose else settings.log_level,
        json_output=settings.log_json,
    )

    try:
        ctx = ExecutionContext.build(
            args.action,
            args.environment or settings.environment,
            scope=split_csv(args.scope),
            regions=split_csv(args.regions) or settings.regions,
        )
        orchestrator = Orchestrator(create_runtime(args.runtime, settings), settings=settings)
        unknown = sorted(n for n in ctx.scope if orchestrator.registry.get(n) is None)
        if unknown:
            warning(f"Unknown layers in scope, ignored: {', '.join(unknown)}")

        header(f"strata {ctx.action.value} · {ctx.environment}")
        result = asyncio.run(orchestrator.run(ctx))
    except StrataError as e:
        error(format_error_message(e))
        raise

    print_run_summary(result)
    if result.skipped_layers:
        info(f"Skipped layers: {', '.join(result.skipped_layers)}")
    success(f"{ctx.action.value} completed for {result.total_stacks} stack(s)")
    return ExitCode.SUCCESS


def main(argv: Sequence[str] | None = None) -> None:
    sys.exit(run_command(argv))


if __name__ == "__main__":
    main()
