# ============================================================================
# src/report_simplifier/cli.py
# ============================================================================
"""
Command line entry point.

Usage:
    report-simplifier process --text "Hemoglobin 10.2 g/dL (Low)"
    report-simplifier process --image report.jpg
    report-simplifier health

Exit codes: 0 ok, 2 unprocessed, 1 error.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config.logging_config import logging_settings
from .core.enums import ReportStatus
from .core.orchestrator import ReportPipeline
from .utils.exceptions import InputError
from .utils.logging import setup_logging

EXIT_CODES = {
    ReportStatus.OK: 0,
    ReportStatus.UNPROCESSED: 2,
    ReportStatus.ERROR: 1,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="report-simplifier",
        description="Turn lab report text or images into a structured, patient-friendly report"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser("process", help="Process a lab report")
    source = process.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", type=str, help="Report text")
    source.add_argument("--text-file", type=Path, help="Path to a text file with the report")
    source.add_argument("--image", type=Path, help="Path to a report image")

    subparsers.add_parser("health", help="Check the completion backend")
    return parser


async def _process(args: argparse.Namespace) -> int:
    pipeline = ReportPipeline()
    try:
        if args.image:
            result = await pipeline.process_report(image_bytes=args.image.read_bytes())
        elif args.text_file:
            result = await pipeline.process_report(text=args.text_file.read_text(encoding="utf-8"))
        else:
            result = await pipeline.process_report(text=args.text)
    except InputError as e:
        print(json.dumps({"status": "error", "reason": str(e)}, indent=2))
        return EXIT_CODES[ReportStatus.ERROR]
    finally:
        await pipeline.close()

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return EXIT_CODES[result.status]


async def _health() -> int:
    pipeline = ReportPipeline()
    try:
        health = await pipeline.health_check()
    finally:
        await pipeline.close()
    print(json.dumps(health, indent=2))
    return 0 if health.get("healthy") else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_JSON,
    )

    if args.command == "health":
        return asyncio.run(_health())
    return asyncio.run(_process(args))


if __name__ == "__main__":
    sys.exit(main())
