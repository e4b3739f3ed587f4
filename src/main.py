# src/main.py - v1
"""CLI entry point: receive, status-update and count commands.

Usage:
    caseintake receive <input|-> [options]
    caseintake status-update <input|-> [options]
    caseintake count <input|->

Input is a text file (or stdin with ``-``) holding one case identifier per
line, exactly as pasted or scanned.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from caseintake.version import __version__

if TYPE_CHECKING:
    from caseintake.batch.models import BatchRunResult
    from caseintake.batch.reporter import ProgressReporter
    from caseintake.core.models import OutcomeEvent

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="caseintake",
        description=f"caseintake v{__version__} - batch case identifier intake",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    for name, mode, help_text in (
        ("receive", "receive", "Check cases against the database, fetch unknown ones externally"),
        ("status-update", "status_update", "Check cases against the database only"),
    ):
        p_run = subparsers.add_parser(name, help=help_text)
        p_run.add_argument("input", help="File with one identifier per line, or - for stdin")
        p_run.add_argument(
            "--backend", choices=["http", "memory"], default=None,
            help="Lookup backend (default: from settings)",
        )
        p_run.add_argument(
            "--fixtures", type=Path, default=None,
            help="JSON fixture file for the memory backend",
        )
        p_run.add_argument(
            "--api-url", default=None,
            help="Backend API base URL (default: from settings)",
        )
        p_run.add_argument(
            "--json", dest="as_json", action="store_true",
            help="Print the final result as JSON",
        )
        p_run.set_defaults(func=_cmd_run, mode=mode)

    p_count = subparsers.add_parser(
        "count", help="Count valid identifiers without looking them up",
    )
    p_count.add_argument("input", help="File with one identifier per line, or - for stdin")
    p_count.set_defaults(func=_cmd_count)

    return parser


async def _cmd_run(args: argparse.Namespace) -> int:
    """Execute a receive or status-update batch."""
    from caseintake.batch.controller import BatchController
    from caseintake.config.settings import ConfigurationError, load_settings
    from caseintake.core.errors import ValidationError
    from caseintake.logging.logger import setup_logging
    from caseintake.lookup.client_factory import create_lookup_client

    overrides: dict[str, object] = {"batch_mode": args.mode}
    if args.fixtures is not None:
        overrides["lookup_fixtures_path"] = args.fixtures
        overrides["lookup_backend"] = args.backend or "memory"
    elif args.backend is not None:
        overrides["lookup_backend"] = args.backend
    if args.api_url is not None:
        overrides["api_base_url"] = args.api_url

    try:
        settings = load_settings(**overrides)
    except ConfigurationError as exc:
        _setup_cli_logging(args.verbose)
        logger.error("Invalid configuration: %s", exc)
        return 1

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    raw_text = _read_input(args.input)
    client = create_lookup_client(settings.lookup_backend, settings)
    async with client:
        controller = BatchController(
            client, mode=settings.batch_mode, on_event=_print_progress,
        )
        try:
            result = await controller.submit(raw_text)
        except ValidationError as exc:
            logger.error("Nothing to process: %s", exc)
            return 1

    if args.as_json:
        print(result.model_dump_json(indent=2))
    else:
        _print_result_summary(result)
    return 0


async def _cmd_count(args: argparse.Namespace) -> int:
    """Print the number of valid identifiers in the input."""
    from caseintake.batch.parser import count_identifiers

    print(count_identifiers(_read_input(args.input)))
    return 0


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _print_progress(event: OutcomeEvent, reporter: ProgressReporter) -> None:
    """Progress sink: one line per event on stderr."""
    print(
        f"[{reporter.total_completed}/{reporter.total_submitted}] "
        f"{event.identifier}: {event.outcome.kind}",
        file=sys.stderr,
        flush=True,
    )


def _print_result_summary(result: BatchRunResult) -> None:
    """Print a human-readable summary of a BatchRunResult."""
    snap = result.snapshot
    print("\nBatch complete:")
    print(f"  Run ID:       {result.run_id}")
    print(f"  Total IDs:    {snap.total_submitted}")
    print(f"  Processed:    {snap.total_completed}")
    print(f"  Existing:     {snap.existing}")
    print(f"  Resolved:     {snap.resolved}")
    print(f"  Failed:       {snap.failed}")
    print(f"  Duration:     {result.duration_seconds:.1f}s")

    for event in snap.existing_bucket:
        record = event.outcome.record
        rush = "YES" if record.is_rush else "NO"
        print(
            f"  existing  {event.identifier}  {record.display_status}  "
            f"{record.display_received_date}  rush={rush}"
        )
    for event in snap.failed_bucket:
        code = f" [{event.outcome.code}]" if event.outcome.code else ""
        print(f"  failed    {event.identifier}  {event.outcome.reason}{code}")

    if result.last_error:
        print(f"  Last error:   {result.last_error}")


def _setup_cli_logging(verbose: bool) -> None:
    """Minimal stderr logging for errors raised before settings are loaded."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
