"""
Tests for CSV log ingestion.
"""
import io
import logging
import math

import pytest

from datalog.core import (
    CsvIngestor,
    IngestError,
    IngestSettings,
    LineTooLongError,
    Log,
    LogReadError,
    MalformedHeaderError,
    Sample,
    ingest_csv,
    parse_number,
)


BASIC_LOG = (
    "time,speed,rpm\n"
    "s,mph,rpm\n"
    "0.0,10.0,1000\n"
    "1.0,12.0,1100\n"
    "2.0,14.0,1200\n"
)


def ingest_text(text: str, settings: IngestSettings = None) -> Log:
    log = Log(name="test")
    ingest_csv(io.StringIO(text), log, settings)
    return log


class UnpluggedStream(io.StringIO):
    """Text stream whose reads fail once a number of lines has been read."""

    def __init__(self, text: str, fail_after: int):
        super().__init__(text)
        self.fail_after = fail_after
        self.lines_read = 0

    def readline(self, *args):
        if self.lines_read >= self.fail_after:
            raise OSError("device unplugged")
        self.lines_read += 1
        return super().readline(*args)


class TestParseNumber:
    """Tests for lenient numeric parsing."""

    @pytest.mark.parametrize("text, expected", [
        ("12.5", 12.5),
        ("12.5abc", 12.5),
        ("  3", 3.0),
        ("-.5", -0.5),
        ("+2.", 2.0),
        ("1e3", 1000.0),
        ("1e", 1.0),
        ("2.5E-1 V", 0.25),
        ("1200\n", 1200.0),
        ("N/A", 0.0),
        ("", 0.0),
        (None, 0.0),
    ])
    def test_prefix_parse(self, text, expected):
        """Test that the longest numeric prefix is used."""
        assert parse_number(text) == pytest.approx(expected)

    def test_special_values(self):
        """Test infinity and NaN spellings."""
        assert parse_number("inf") == math.inf
        assert parse_number("-Infinity") == -math.inf
        assert math.isnan(parse_number("nan"))


class TestCsvIngestor:
    """Tests for CsvIngestor."""

    def test_basic_log(self):
        """Test a well-formed log."""
        log = ingest_text(BASIC_LOG)

        assert log.channel_count() == 2
        assert log.channel_names() == ["speed", "rpm"]
        assert [ch.units for ch in log.channels] == ["mph", "rpm"]
        assert all(ch.sample_count == 3 for ch in log.channels)
        assert log.duration() == pytest.approx(2.0)

        speed = log.get_channel("speed")
        assert [s.timestamp for s in speed.samples] == [0.0, 1.0, 2.0]
        assert [s.value for s in speed.samples] == [10.0, 12.0, 14.0]

    def test_column_alignment(self):
        """Test that channel order follows the header columns."""
        names = [f"sig{i}" for i in range(12)]
        text = (
            "time," + ",".join(names) + "\n"
            + "s," + ",".join("V" for _ in names) + "\n"
            + "0.0," + ",".join(str(i) for i in range(12)) + "\n"
        )

        log = ingest_text(text)

        assert log.channel_names() == names
        for i, ch in enumerate(log.channels):
            assert ch.samples[0].value == float(i)

    def test_every_channel_gets_every_row(self):
        """Test sample counts when all rows are complete."""
        rows = "".join(f"{i * 0.1},{i},{i * 2},{i * 3}\n" for i in range(25))
        log = ingest_text("t,a,b,c\ns,V,A,W\n" + rows)

        assert [ch.sample_count for ch in log.channels] == [25, 25, 25]

    def test_short_row(self):
        """Test that a short row only skips the missing channels."""
        text = (
            "time,speed,rpm\n"
            "s,mph,rpm\n"
            "0.0,10.0,1000\n"
            "1.0,12.0\n"
            "2.0,14.0,1200\n"
        )

        log = ingest_text(text)

        speed = log.get_channel("speed")
        rpm = log.get_channel("rpm")
        assert speed.sample_count == 3
        assert rpm.sample_count == 2
        assert [s.timestamp for s in rpm.samples] == [0.0, 2.0]
        assert [s.value for s in rpm.samples] == [1000.0, 1200.0]

    def test_header_only(self):
        """Test a log with a header and units but no data."""
        log = ingest_text("time,speed,rpm\ns,mph,rpm\n")

        assert log.channel_count() == 2
        assert all(ch.sample_count == 0 for ch in log.channels)
        assert log.duration() == 0.0

    def test_non_numeric_value(self):
        """Test that a non-numeric field still produces a 0.0 sample."""
        text = (
            "time,speed,rpm\n"
            "s,mph,rpm\n"
            "0.0,N/A,1000\n"
        )

        log = ingest_text(text)

        speed = log.get_channel("speed")
        assert speed.sample_count == 1
        assert speed.samples[0].value == 0.0
        assert log.get_channel("rpm").samples[0].value == 1000.0

    def test_non_numeric_timestamp(self):
        """Test that an unparsable timestamp becomes 0.0."""
        log = ingest_text("time,speed\ns,mph\nnow,5\n")

        assert log.get_channel("speed").samples[0].timestamp == 0.0

    def test_empty_field_keeps_alignment(self):
        """Test that an empty field is a 0.0 value, not a skipped column."""
        log = ingest_text("time,speed,rpm\ns,mph,rpm\n1.0,,1200\n")

        assert log.get_channel("speed").samples[0].value == 0.0
        assert log.get_channel("rpm").samples[0].value == 1200.0

    def test_tokens_are_trimmed(self):
        """Test that whitespace and CR/LF do not end up in channel names."""
        log = ingest_text("time, speed ,rpm \r\ns , mph,rpm\r\n0.0,1,2\r\n")

        assert log.channel_names() == ["speed", "rpm"]
        assert [ch.units for ch in log.channels] == ["mph", "rpm"]
        assert log.get_channel("rpm").samples[0].value == 2.0

    def test_more_names_than_units(self):
        """Test that extra header columns are ignored."""
        log = ingest_text("time,speed,rpm,throttle\ns,mph\n0.0,1,2,3\n")

        assert log.channel_names() == ["speed"]
        assert log.get_channel("speed").sample_count == 1

    def test_more_units_than_names(self):
        """Test that extra unit columns are ignored."""
        log = ingest_text("time,speed\ns,mph,rpm,%\n0.0,1,2,3\n")

        assert log.channel_names() == ["speed"]

    def test_mismatch_logs_warning(self, caplog):
        """Test that a header/unit mismatch is reported."""
        with caplog.at_level(logging.WARNING, logger="datalog.core.io_handler"):
            ingest_text("time,speed,rpm\ns,mph\n0.0,1,2\n")

        assert "unit row" in caplog.text

    def test_empty_signal_name(self):
        """Test that a blank header cell gets a placeholder name."""
        log = ingest_text("time,,rpm\ns,mph,rpm\n0.0,1,2\n")

        assert log.channel_names() == ["column_2", "rpm"]
        assert log.get_channel("column_2").samples[0].value == 1.0

    def test_blank_lines_ignored(self):
        """Test that blank data lines add nothing."""
        log = ingest_text("time,speed\ns,mph\n0.0,1\n\n1.0,2\n\n")

        assert log.get_channel("speed").sample_count == 2

    def test_decimals_fixed(self):
        """Test that every channel gets the configured precision."""
        log = ingest_text(BASIC_LOG)
        assert [ch.decimals for ch in log.channels] == [3, 3]

        log = ingest_text(BASIC_LOG, IngestSettings(decimals=1))
        assert [ch.decimals for ch in log.channels] == [1, 1]

    def test_growth_during_ingest(self):
        """Test ingesting more rows than the initial channel capacity."""
        rows = "".join(f"{i},{i * 10}\n" for i in range(9))

        log = ingest_text("time,speed\ns,mph\n" + rows, IngestSettings(channel_capacity=2))

        speed = log.get_channel("speed")
        assert [s.value for s in speed.samples] == [i * 10.0 for i in range(9)]
        assert speed.capacity == 16

    def test_custom_delimiter(self):
        """Test a semicolon-separated log."""
        log = ingest_text("time;speed\ns;mph\n0.5;7\n", IngestSettings(delimiter=";"))

        assert log.get_channel("speed").samples[0].timestamp == 0.5
        assert log.get_channel("speed").samples[0].value == 7.0

    def test_long_lines_allowed_by_default(self):
        """Test that lines have no length limit unless configured."""
        names = [f"signal_with_a_long_name_{i}" for i in range(100)]
        text = "time," + ",".join(names) + "\ns," + ",".join("V" for _ in names) + "\n"

        log = ingest_text(text)

        assert log.channel_count() == 100

    def test_line_too_long(self):
        """Test the configured line length limit."""
        text = "time,speed\ns,mph\n0.0,1.0\n1.0," + "1" * 50 + "\n"

        with pytest.raises(LineTooLongError) as exc_info:
            ingest_text(text, IngestSettings(max_line_length=20))

        assert exc_info.value.line_number == 4
        assert exc_info.value.limit == 20


class TestMalformedHeader:
    """Tests for sources without a complete header."""

    @pytest.mark.parametrize("text", ["", "time,speed,rpm\n"])
    def test_missing_header_rows(self, text):
        """Test that a missing header or unit row fails."""
        log = Log(name="test")

        with pytest.raises(MalformedHeaderError):
            CsvIngestor().ingest(io.StringIO(text), log)

        assert log.channel_count() == 0

    def test_existing_channels_untouched(self):
        """Test that a failed ingestion leaves earlier content alone."""
        log = Log(name="test")
        log.add_channel("speed", "mph", 3).append_sample(0.0, 1.0)

        with pytest.raises(MalformedHeaderError):
            ingest_csv(io.StringIO("time,rpm\n"), log)

        assert log.channel_names() == ["speed"]
        assert log.get_channel("speed").sample_count == 1


class TestReadFailure:
    """Tests for sources that fail part way through."""

    def setup_method(self):
        """Set up a log that already holds a channel."""
        self.log = Log(name="session")
        old = self.log.add_channel("old", "V", 3)
        old.append_sample(0.0, 5.0)

    def assert_log_unchanged(self):
        assert self.log.channel_names() == ["old"]
        assert self.log.get_channel("old").samples == [Sample(0.0, 5.0)]

    def test_read_error_is_ingest_error(self):
        """Test that a failing readline surfaces as LogReadError."""
        source = UnpluggedStream(BASIC_LOG, fail_after=3)

        with pytest.raises(LogReadError) as exc_info:
            ingest_csv(source, self.log)

        assert isinstance(exc_info.value, IngestError)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "line 4" in str(exc_info.value)

    def test_failure_after_header_leaves_log_unchanged(self):
        """Test that no partly filled channel reaches the log."""
        with pytest.raises(IngestError):
            ingest_csv(UnpluggedStream(BASIC_LOG, fail_after=3), self.log)

        self.assert_log_unchanged()

    def test_failure_in_header_leaves_log_unchanged(self):
        """Test a failure while reading the unit row."""
        with pytest.raises(LogReadError):
            ingest_csv(UnpluggedStream(BASIC_LOG, fail_after=1), self.log)

        self.assert_log_unchanged()

    def test_line_too_long_leaves_log_unchanged(self):
        """Test that a rejected long line does not leave partial channels."""
        text = "time,speed\ns,mph\n0.0,1.0\n1.0," + "1" * 50 + "\n"

        with pytest.raises(LineTooLongError):
            ingest_csv(io.StringIO(text), self.log, IngestSettings(max_line_length=20))

        self.assert_log_unchanged()

    def test_success_appends_after_existing_channels(self):
        """Test that new channels follow the ones already in the log."""
        ingest_csv(io.StringIO(BASIC_LOG), self.log)

        assert self.log.channel_names() == ["old", "speed", "rpm"]
        assert self.log.get_channel("rpm").sample_count == 3

    def test_destroyed_log_rejected(self):
        """Test that a destroyed log cannot be filled."""
        self.log.destroy()

        with pytest.raises(RuntimeError):
            ingest_csv(io.StringIO(BASIC_LOG), self.log)
