from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from sheetstream.application.services.conversion_service import ConversionService
from sheetstream.cli.context import CLIContext
from sheetstream.core.config import DISCOVERY_MODES, load_settings
from sheetstream.core.errors import ConfigurationError
from sheetstream.core.logging import configure_logging
from sheetstream.domain.models.conversion import ConversionReport

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors are fatal errors: exit 1 like every other failure."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="sheetstream",
        description="Stream every sheet of an XLSX workbook into its own CSV file",
    )
    parser.add_argument("--input", required=True, type=Path, help="Excel (.xlsx) file path")
    parser.add_argument("--output", required=True, type=Path, help="Output directory (created if missing)")
    parser.add_argument("--delimiter", default=None, help="CSV field delimiter (default: ;)")
    parser.add_argument(
        "--discovery",
        choices=DISCOVERY_MODES,
        default=None,
        help="How worksheet parts are found (default: convention)",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        default=None,
        help="Report progress on stderr every N rows (default: 50000)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console(stderr=True)
    configure_logging(args.verbose, console=console)

    try:
        settings = load_settings(
            delimiter=args.delimiter,
            progress_every=args.progress_every,
            discovery=args.discovery,
        )
    except ConfigurationError as exc:
        logger.error(str(exc))
        report = ConversionReport()
        report.fail(str(exc))
        _emit_report(report)
        return 1

    ctx = CLIContext(settings=settings, console=console)
    return run(args, ctx)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    def on_progress(sheet_name: str, rows: int) -> None:
        ctx.console.print(f"processed {rows} rows of {sheet_name}", markup=False, highlight=False)

    service = ConversionService(ctx.settings)
    report = service.convert(args.input, args.output, progress_callback=on_progress)
    _emit_report(report)
    return 0 if report.success else 1


def _emit_report(report: ConversionReport) -> None:
    sys.stdout.write(json.dumps(report.to_dict(), ensure_ascii=False, indent=2) + "\n")
    sys.stdout.flush()


if __name__ == "__main__":
    raise SystemExit(main())
