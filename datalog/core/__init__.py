"""
Core module for the datalog package.
Contains the log data model, ingestion and reporting helpers.
"""

from .errors import (
    FormatNotImplementedError,
    IngestError,
    LineTooLongError,
    LogReadError,
    MalformedHeaderError,
)
from .models import (
    Channel,
    IngestSettings,
    Log,
    LogFormat,
    Sample,
    destroy_log,
)
from .io_handler import (
    BusLogIngestor,
    CsvIngestor,
    LogIngestor,
    LogReader,
    VendorLogIngestor,
    get_ingestor,
    ingest_bus_log,
    ingest_csv,
    ingest_vendor_log,
    load_log,
    load_settings,
    parse_number,
)
from .analysis import (
    channel_summary,
    filter_channel_indices,
    find_channels,
    format_channel_listing,
    format_frequency_report,
)

__all__ = [
    # Errors
    "FormatNotImplementedError",
    "IngestError",
    "LineTooLongError",
    "LogReadError",
    "MalformedHeaderError",
    # Models
    "Channel",
    "IngestSettings",
    "Log",
    "LogFormat",
    "Sample",
    "destroy_log",
    # IO
    "BusLogIngestor",
    "CsvIngestor",
    "LogIngestor",
    "LogReader",
    "VendorLogIngestor",
    "get_ingestor",
    "ingest_bus_log",
    "ingest_csv",
    "ingest_vendor_log",
    "load_log",
    "load_settings",
    "parse_number",
    # Analysis
    "channel_summary",
    "filter_channel_indices",
    "find_channels",
    "format_channel_listing",
    "format_frequency_report",
]
