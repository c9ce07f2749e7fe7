"""
Error types raised while ingesting measurement logs.
"""
from __future__ import annotations


class IngestError(Exception):
    """Base class for failures of a single ingestion call."""


class LogReadError(IngestError):
    """The log source could not be opened or read."""


class MalformedHeaderError(IngestError):
    """The header row or the unit row is missing."""


class LineTooLongError(IngestError):
    """A line exceeds the configured maximum line length."""

    def __init__(self, line_number: int, length: int, limit: int):
        super().__init__(
            f"Line {line_number} is {length} characters long (limit {limit})"
        )
        self.line_number = line_number
        self.length = length
        self.limit = limit


class FormatNotImplementedError(IngestError, NotImplementedError):
    """The requested log format has no parser yet."""
