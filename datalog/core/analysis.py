"""
Summaries and channel lookup for loaded logs.
"""
from __future__ import annotations

import pandas as pd
from rapidfuzz import fuzz

from .models import Log


SUMMARY_COLUMNS = ["name", "units", "samples", "start", "end", "average_frequency"]


def channel_summary(log: Log) -> pd.DataFrame:
    """Get one row per channel with its size, time range and sample rate."""
    rows = [
        {
            "name": ch.name,
            "units": ch.units,
            "samples": ch.sample_count,
            "start": ch.start(),
            "end": ch.end(),
            "average_frequency": ch.average_frequency(),
        }
        for ch in log.channels
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def format_channel_listing(log: Log) -> str:
    """
    Render the channel list of a log as text.

    Time values are shown with each channel's display precision.
    """
    lines = [f"Log: {log.name} ({log.channel_count()} channels)"]
    for index, ch in enumerate(log.channels, start=1):
        unit = f" [{ch.units}]" if ch.units else ""
        lines.append(
            f"{index:3d}. {ch.name}{unit}: {ch.sample_count} samples, "
            f"{ch.start():.{ch.decimals}f} - {ch.end():.{ch.decimals}f} s"
        )
    return "\n".join(lines)


def format_frequency_report(log: Log) -> str:
    """Render the average sample rate of every channel as text."""
    lines = [f"Log: {log.name}, duration {log.duration():.3f} s"]
    if not log.channels:
        lines.append("  (no channels)")
    width = max((len(ch.name) for ch in log.channels), default=0)
    for ch in log.channels:
        lines.append(f"  {ch.name:<{width}}  {ch.average_frequency():10.3f} Hz")
    return "\n".join(lines)


def find_channels(log: Log, query: str, threshold: int = 80) -> list[str]:
    """
    Find channel names matching a query.

    Args:
        log: Log to search
        query: Channel name, exact or approximate
        threshold: Minimum similarity score for fuzzy matching (0-100)

    Returns:
        Exact (case-insensitive) matches first, then fuzzy matches, best first
    """
    query_lower = query.strip().lower()
    if not query_lower:
        return []

    exact = [ch.name for ch in log.channels if ch.name.lower() == query_lower]

    scored = []
    for ch in log.channels:
        if ch.name in exact:
            continue
        score = fuzz.token_sort_ratio(query_lower, ch.name.lower())
        if score >= threshold:
            scored.append((score, ch.name))

    scored.sort(key=lambda item: -item[0])
    return exact + [name for _, name in scored]


def filter_channel_indices(log: Log, query: str, threshold: int = 60) -> list[int]:
    """
    Get the positions of the channels matching a search query.

    An empty query keeps every channel. Otherwise substring hits come first
    in log order, followed by fuzzy hits from find_channels. Channels that
    share a name are all kept.
    """
    if not query.strip():
        return list(range(log.channel_count()))

    query_lower = query.strip().lower()
    indices = [i for i, ch in enumerate(log.channels) if query_lower in ch.name.lower()]
    for name in find_channels(log, query, threshold=threshold):
        indices += [
            i for i, ch in enumerate(log.channels)
            if ch.name == name and i not in indices
        ]
    return indices
