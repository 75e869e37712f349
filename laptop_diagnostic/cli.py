"""Entry point for the laptop-diagnostic command line tool."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import DiagnosticSettings
from .runner import run_diagnostic

logger = logging.getLogger("laptop_diagnostic")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check a laptop's hardware, run short stress tests and suggest upgrades.",
    )
    parser.add_argument("--output-dir", default=".", help="Directory for the JSON report and scratch file")
    parser.add_argument("--cpu-duration", type=int, default=10, help="Seconds to run the CPU stress test")
    parser.add_argument("--skip-stress", action="store_true", help="Skip the CPU, memory and storage stress tests")
    parser.add_argument("--json", action="store_true", help="Also print the full JSON report to stdout")
    parser.add_argument("--ui", action="store_true", help="Render the summary with Rich tables")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    console = Console()
    settings = DiagnosticSettings.from_args(args)

    try:
        report, _ = run_diagnostic(settings, console=console, rich_summary=args.ui)
    except Exception:
        logger.exception("Diagnostic failed")
        console.print("[bold red]Diagnostic failed, no report was written.[/bold red]")
        return 1

    if args.json:
        print(report.to_json())
    console.print("\n[bold green]Diagnostic complete![/bold green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
