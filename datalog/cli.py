#!/usr/bin/env python3
"""
Command line inspection of measurement logs.

Prints the channel listing of each log and, optionally, the average
sample rate of every channel.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from datalog.core import (
    IngestError,
    IngestSettings,
    LogFormat,
    LogReader,
    format_channel_listing,
    format_frequency_report,
    load_settings,
)

logger = logging.getLogger(__name__)

FORMAT_CHOICES = {
    "csv": LogFormat.CSV,
    "bus": LogFormat.BUS_LOG,
    "vendor": LogFormat.VENDOR_LOG,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect time-series measurement logs")
    parser.add_argument("files", nargs="+", type=Path, help="Log files to read")
    parser.add_argument(
        "--format",
        choices=sorted(FORMAT_CHOICES),
        default=None,
        help="Source format (default: csv, or bus when --schema is given)"
    )
    parser.add_argument("--schema", type=Path, default=None, help="Message definition file for bus logs")
    parser.add_argument("--config", type=Path, default=None, help="JSON file with ingestion settings")
    parser.add_argument("--frequency", action="store_true", help="Also print average channel frequencies")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the log inspector. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    settings = IngestSettings()
    if args.config:
        try:
            settings = load_settings(args.config)
        except (OSError, ValueError) as e:
            parser.error(f"cannot load settings from {args.config}: {e}")
    reader = LogReader(settings)
    fmt = FORMAT_CHOICES[args.format] if args.format else None

    failures = 0
    for filepath in args.files:
        try:
            log = reader.read_file(filepath, fmt=fmt, schema_path=args.schema)
        except (IngestError, ValueError) as e:
            logger.debug(f"Skipping {filepath}", exc_info=True)
            print(f"{filepath}: {e}", file=sys.stderr)
            failures += 1
            continue

        print(format_channel_listing(log))
        if args.frequency:
            print(format_frequency_report(log))

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
