"""
Core data models for measurement logs.

A Log owns an ordered list of Channels, and each Channel owns an ordered
list of (timestamp, value) Samples. Channels grow independently, so two
channels of the same log may hold different numbers of samples.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator, Optional

import numpy as np
import pandas as pd


DEFAULT_CHANNEL_CAPACITY = 1000  # Initial sample capacity of a new channel
DEFAULT_LOG_CAPACITY = 10        # Initial channel capacity of a new log
DEFAULT_DECIMALS = 3


class LogFormat(Enum):
    """Source formats a log can be ingested from."""
    CSV = auto()         # Two-row header CSV (names + units)
    BUS_LOG = auto()     # Binary bus log decoded through a schema file
    VENDOR_LOG = auto()  # Vendor-specific proprietary log


@dataclass(frozen=True)
class Sample:
    """A single measurement."""
    timestamp: float
    value: float


@dataclass
class Channel:
    """A named, unit-tagged sequence of samples."""
    name: str
    units: str = ""
    decimals: int = DEFAULT_DECIMALS  # Display precision hint
    initial_capacity: int = DEFAULT_CHANNEL_CAPACITY
    samples: list[Sample] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Channel name must not be empty")
        self._capacity = max(1, int(self.initial_capacity))

    @property
    def capacity(self) -> int:
        """Current storage capacity (grows by doubling)."""
        return self._capacity

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def append_sample(self, timestamp: float, value: float) -> None:
        """Append a sample, doubling the capacity first when it is full."""
        if len(self.samples) >= self._capacity:
            self._capacity *= 2
        self.samples.append(Sample(float(timestamp), float(value)))

    def clear(self) -> None:
        """Drop all samples and return to the initial capacity."""
        self.samples = []
        self._capacity = max(1, int(self.initial_capacity))

    def start(self) -> float:
        """Timestamp of the first sample, 0.0 when empty."""
        if not self.samples:
            return 0.0
        return self.samples[0].timestamp

    def end(self) -> float:
        """Timestamp of the last sample, 0.0 when empty."""
        if not self.samples:
            return 0.0
        return self.samples[-1].timestamp

    def average_frequency(self) -> float:
        """
        Average sample rate over the channel's time span.

        Returns 0.0 when there are fewer than two samples or the samples
        span no time at all.
        """
        count = len(self.samples)
        if count < 2:
            return 0.0
        span = self.end() - self.start()
        if span == 0.0:
            return 0.0
        return (count - 1) / span

    def timestamps(self) -> np.ndarray:
        """Get the sample timestamps as a float64 array."""
        return np.fromiter((s.timestamp for s in self.samples), dtype=np.float64, count=len(self.samples))

    def values(self) -> np.ndarray:
        """Get the sample values as a float64 array."""
        return np.fromiter((s.value for s in self.samples), dtype=np.float64, count=len(self.samples))

    def to_series(self) -> pd.Series:
        """Get the samples as a Series indexed by timestamp."""
        return pd.Series(
            self.values(),
            index=pd.Index(self.timestamps(), name="timestamp"),
            name=self.name,
        )


@dataclass
class Log:
    """A named collection of channels in source column order."""
    name: str = ""
    channels: list[Channel] = field(default_factory=list)

    def __post_init__(self):
        self._channel_capacity = max(DEFAULT_LOG_CAPACITY, len(self.channels))
        self._destroyed = False

    def __len__(self) -> int:
        return len(self.channels)

    def __iter__(self) -> Iterator[Channel]:
        return iter(self.channels)

    @property
    def channel_capacity(self) -> int:
        return self._channel_capacity

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def add_channel(
        self,
        name: str,
        units: str = "",
        decimals: int = DEFAULT_DECIMALS,
        initial_capacity: int = DEFAULT_CHANNEL_CAPACITY
    ) -> Channel:
        """Append a new empty channel and return it."""
        channel = Channel(
            name=name,
            units=units,
            decimals=decimals,
            initial_capacity=initial_capacity
        )
        self.add_channels([channel])
        return channel

    def add_channels(self, channels: list[Channel]) -> None:
        """Append already built channels; the log takes ownership of them."""
        if self._destroyed:
            raise RuntimeError(f"Log {self.name!r} has been destroyed")

        for channel in channels:
            if len(self.channels) >= self._channel_capacity:
                self._channel_capacity *= 2
            self.channels.append(channel)

    def clear(self) -> None:
        """Remove every channel. The log stays usable."""
        for channel in self.channels:
            channel.clear()
        self.channels = []

    def destroy(self) -> None:
        """Clear the log and release its storage. Repeated calls do nothing."""
        if self._destroyed:
            return
        self.clear()
        self._channel_capacity = 0
        self._destroyed = True

    def channel_count(self) -> int:
        return len(self.channels)

    def channel_names(self) -> list[str]:
        return [ch.name for ch in self.channels]

    def get_channel(self, name: str) -> Optional[Channel]:
        """Get the first channel with the given name."""
        for channel in self.channels:
            if channel.name == name:
                return channel
        return None

    def start(self) -> float:
        """Earliest channel start, 0.0 with no channels."""
        if not self.channels:
            return 0.0
        return min(ch.start() for ch in self.channels)

    def end(self) -> float:
        """Latest channel end, 0.0 with no channels."""
        if not self.channels:
            return 0.0
        return max(ch.end() for ch in self.channels)

    def duration(self) -> float:
        if not self.channels:
            return 0.0
        return self.end() - self.start()

    def to_dataframe(self) -> pd.DataFrame:
        """
        Get all channels as one dataframe indexed by timestamp.

        Channels are outer-joined on timestamp, so rows where a channel has
        no sample hold NaN. Repeated timestamps within a channel keep the
        last value.
        """
        if not self.channels:
            return pd.DataFrame(index=pd.Index([], name="timestamp", dtype=np.float64))

        columns = []
        for channel in self.channels:
            series = channel.to_series()
            columns.append(series.groupby(level=0).last())

        result = pd.concat(columns, axis=1, sort=False)
        result.columns = self.channel_names()
        result.index.name = "timestamp"
        return result.sort_index()


def destroy_log(log: Optional[Log]) -> None:
    """Destroy a log, doing nothing when there is none."""
    if log is None:
        return
    log.destroy()


@dataclass
class IngestSettings:
    """Tunable settings for log ingestion."""
    delimiter: str = ","
    decimals: int = DEFAULT_DECIMALS
    channel_capacity: int = DEFAULT_CHANNEL_CAPACITY
    max_line_length: Optional[int] = None  # None means unbounded
    encoding: str = "utf-8"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "delimiter": self.delimiter,
            "decimals": self.decimals,
            "channel_capacity": self.channel_capacity,
            "max_line_length": self.max_line_length,
            "encoding": self.encoding
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IngestSettings:
        """Deserialize from dictionary."""
        max_line_length = data.get("max_line_length")
        return cls(
            delimiter=data.get("delimiter", ","),
            decimals=int(data.get("decimals", DEFAULT_DECIMALS)),
            channel_capacity=int(data.get("channel_capacity", DEFAULT_CHANNEL_CAPACITY)),
            max_line_length=int(max_line_length) if max_line_length is not None else None,
            encoding=data.get("encoding", "utf-8")
        )
