"""
Log ingestion for the supported source formats.
"""
from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional

from .errors import (
    FormatNotImplementedError,
    LineTooLongError,
    LogReadError,
    MalformedHeaderError,
)
from .models import Channel, IngestSettings, Log, LogFormat

logger = logging.getLogger(__name__)


# Longest floating point prefix, after optional leading whitespace
NUMBER_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

CSV_SUFFIXES = [".csv", ".txt", ".dat"]


def _parse_prefix(text: str) -> tuple[float, bool]:
    """Parse the numeric prefix of text; the flag tells if nothing else followed."""
    match = NUMBER_PREFIX.match(text)
    if not match:
        return 0.0, False
    return float(match.group(1)), match.end() == len(text.rstrip())


def parse_number(text: Optional[str]) -> float:
    """
    Parse a field leniently.

    Reads the longest valid number at the start of the field and ignores
    whatever follows it. A field without any numeric prefix, or a missing
    field, yields 0.0.
    """
    if text is None:
        return 0.0
    return _parse_prefix(text)[0]


def load_settings(filepath: Path | str) -> IngestSettings:
    """Load ingestion settings from a JSON file."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {filepath} must hold a JSON object")
    return IngestSettings.from_dict(data)


class LogIngestor(ABC):
    """Parses one source format into a Log."""

    # Whether the source must be opened in binary mode
    binary = False

    def __init__(self, settings: Optional[IngestSettings] = None):
        self.settings = settings or IngestSettings()

    @abstractmethod
    def ingest(self, source: IO, log: Log) -> None:
        """Read the whole source and add its channels and samples to log."""


class CsvIngestor(LogIngestor):
    """
    Ingests CSV logs with a two-row header.

    Row 1 holds the signal names and row 2 their units; the first column of
    every row is the timestamp. Value anomalies never abort ingestion:
    unparsable fields become 0.0 and short rows just leave the trailing
    channels without a sample for that timestamp.
    """

    def ingest(self, source: IO, log: Log) -> None:
        """
        Read the whole source into log.

        Channels are filled on their own and only handed to log once the
        source is exhausted, so a failed call leaves log as it was.
        """
        if log.destroyed:
            raise RuntimeError(f"Log {log.name!r} has been destroyed")

        delimiter = self.settings.delimiter

        header = self._read_line(source, 1)
        units = self._read_line(source, 2)
        if header is None or units is None:
            raise MalformedHeaderError("Log source needs a header row and a unit row")

        # First column is the timestamp
        names = header.split(delimiter)[1:]
        unit_names = units.split(delimiter)[1:]

        if len(names) != len(unit_names):
            logger.warning(
                f"Header has {len(names)} signal columns but unit row has {len(unit_names)}; "
                f"using the first {min(len(names), len(unit_names))}"
            )

        channels = []
        for index, (name, unit) in enumerate(zip(names, unit_names)):
            name = name.strip()
            if not name:
                name = f"column_{index + 2}"
                logger.warning(f"Empty signal name in column {index + 2}, using {name!r}")
            channels.append(Channel(
                name=name,
                units=unit.strip(),
                decimals=self.settings.decimals,
                initial_capacity=self.settings.channel_capacity
            ))

        logger.debug(f"Created {len(channels)} channels: {[ch.name for ch in channels]}")

        rows = 0
        short_rows = 0
        bad_fields = 0
        line_number = 2

        while True:
            line_number += 1
            line = self._read_line(source, line_number)
            if line is None:
                break
            if not line:
                continue

            fields = line.split(delimiter)
            timestamp, clean = _parse_prefix(fields[0])
            if not clean:
                bad_fields += 1

            values = fields[1:]
            if len(values) < len(channels):
                short_rows += 1

            for channel, field in zip(channels, values):
                value, clean = _parse_prefix(field)
                if not clean:
                    bad_fields += 1
                channel.append_sample(timestamp, value)

            rows += 1

        log.add_channels(channels)

        if short_rows:
            logger.warning(f"{short_rows} of {rows} rows had fewer values than channels")
        if bad_fields:
            logger.warning(f"{bad_fields} fields were not plain numbers and were parsed leniently")
        logger.debug(f"Read {rows} data rows into log {log.name!r}")

    def _read_line(self, source: IO, line_number: int) -> Optional[str]:
        """Read one line without its line ending; None at end of source."""
        try:
            line = source.readline()
        except OSError as e:
            raise LogReadError(f"Failed to read line {line_number}: {e}") from e
        if not line:
            return None

        line = line.rstrip("\r\n")
        limit = self.settings.max_line_length
        if limit is not None and len(line) > limit:
            raise LineTooLongError(line_number, len(line), limit)
        return line


class BusLogIngestor(LogIngestor):
    """Ingests binary bus logs decoded with a message definition file."""

    binary = True

    def __init__(self, schema_path: Path | str, settings: Optional[IngestSettings] = None):
        super().__init__(settings)
        self.schema_path = Path(schema_path)

    def ingest(self, source: IO, log: Log) -> None:
        raise FormatNotImplementedError(
            f"Bus log ingestion is not implemented (schema: {self.schema_path})"
        )


class VendorLogIngestor(LogIngestor):
    """Ingests vendor-specific proprietary logs."""

    binary = True

    def ingest(self, source: IO, log: Log) -> None:
        raise FormatNotImplementedError("Vendor log ingestion is not implemented")


def get_ingestor(
    fmt: LogFormat,
    settings: Optional[IngestSettings] = None,
    schema_path: Optional[Path | str] = None
) -> LogIngestor:
    """Get the ingestor for a source format."""
    if fmt == LogFormat.CSV:
        return CsvIngestor(settings)
    if fmt == LogFormat.BUS_LOG:
        if schema_path is None:
            raise ValueError("Bus log ingestion requires a schema path")
        return BusLogIngestor(schema_path, settings)
    if fmt == LogFormat.VENDOR_LOG:
        return VendorLogIngestor(settings)
    raise ValueError(f"Unknown log format: {fmt}")


def ingest_csv(source: IO, log: Log, settings: Optional[IngestSettings] = None) -> None:
    """Ingest a CSV log from a text stream."""
    CsvIngestor(settings).ingest(source, log)


def ingest_bus_log(source: IO, schema_path: Path | str, log: Log) -> None:
    """Ingest a binary bus log using its schema file."""
    BusLogIngestor(schema_path).ingest(source, log)


def ingest_vendor_log(source: IO, log: Log) -> None:
    """Ingest a vendor-specific log."""
    VendorLogIngestor().ingest(source, log)


class LogReader:
    """Reads log files from disk into Log objects."""

    def __init__(self, settings: Optional[IngestSettings] = None):
        self.settings = settings or IngestSettings()

    def detect_format(self, filepath: Path, schema_path: Optional[Path | str] = None) -> LogFormat:
        """Guess the source format of a file."""
        if schema_path is not None:
            return LogFormat.BUS_LOG
        if filepath.suffix.lower() not in CSV_SUFFIXES:
            logger.debug(f"Unrecognised suffix {filepath.suffix!r}, reading {filepath.name} as CSV")
        return LogFormat.CSV

    def ingest(
        self,
        source: IO,
        log: Log,
        fmt: LogFormat = LogFormat.CSV,
        schema_path: Optional[Path | str] = None
    ) -> None:
        """Ingest an already open source into log."""
        get_ingestor(fmt, self.settings, schema_path).ingest(source, log)

    def read_file(
        self,
        filepath: Path | str,
        log: Optional[Log] = None,
        fmt: Optional[LogFormat] = None,
        schema_path: Optional[Path | str] = None
    ) -> Log:
        """
        Read a log file.

        Args:
            filepath: Path of the log file
            log: Log to fill (default: a new log named after the file)
            fmt: Source format (default: detected from the arguments)
            schema_path: Message definition file for bus logs

        Returns:
            The filled log
        """
        filepath = Path(filepath)
        if fmt is None:
            fmt = self.detect_format(filepath, schema_path)
        if log is None:
            log = Log(name=filepath.stem)

        ingestor = get_ingestor(fmt, self.settings, schema_path)

        if not filepath.is_file():
            raise LogReadError(f"File not found: {filepath}")

        logger.info(f"Reading {fmt.name} log {filepath}")
        try:
            if ingestor.binary:
                with open(filepath, "rb") as f:
                    ingestor.ingest(f, log)
            else:
                with open(filepath, "r", encoding=self.settings.encoding, errors="replace") as f:
                    ingestor.ingest(f, log)
        except OSError as e:
            raise LogReadError(f"Failed to read {filepath}: {e}") from e

        logger.info(f"Loaded {log.channel_count()} channels from {filepath.name}")
        return log


def load_log(
    filepath: Path | str,
    fmt: Optional[LogFormat] = None,
    schema_path: Optional[Path | str] = None,
    settings: Optional[IngestSettings] = None
) -> Log:
    """Read a log file into a new Log."""
    return LogReader(settings).read_file(filepath, fmt=fmt, schema_path=schema_path)
