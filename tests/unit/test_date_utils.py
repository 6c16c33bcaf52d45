"""Unit tests for date utilities."""
import pytest
from datetime import datetime, timedelta, timezone
from src.utils.date_utils import epoch_millis, format_timestamp, now_utc, parse_iso, to_iso


class TestToIso:
    """Test ISO 8601 formatting."""

    def test_utc_with_milliseconds_and_z(self):
        """Test output uses millisecond precision and a Z suffix."""
        moment = datetime(2026, 10, 18, 9, 30, 0, 123456, tzinfo=timezone.utc)
        assert to_iso(moment) == "2026-10-18T09:30:00.123Z"

    def test_converts_other_timezones_to_utc(self):
        """Test aware datetimes are converted to UTC."""
        taipei = timezone(timedelta(hours=8))
        moment = datetime(2026, 10, 18, 17, 30, tzinfo=taipei)
        assert to_iso(moment) == "2026-10-18T09:30:00.000Z"

    def test_naive_datetime_treated_as_utc(self):
        """Test naive datetimes are not shifted."""
        assert to_iso(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05.000Z"


class TestParseIso:
    """Test ISO 8601 parsing."""

    def test_parse_z_suffix(self):
        """Test Z suffix parses as UTC."""
        parsed = parse_iso("2026-10-18T09:30:00.123Z")
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)
        assert parsed.microsecond == 123000

    def test_parse_round_trip(self):
        """Test formatted timestamps parse back to the same instant."""
        moment = datetime(2026, 10, 18, 9, 30, 0, 123000, tzinfo=timezone.utc)
        assert parse_iso(to_iso(moment)) == moment

    @pytest.mark.parametrize("value", ["18/10/2026 09:30", "", None])
    def test_invalid_timestamp_raises_error(self, value):
        """Test malformed timestamps raise ValueError."""
        with pytest.raises(ValueError, match="Invalid timestamp format"):
            parse_iso(value)


class TestEpochMillis:
    """Test epoch millisecond conversion."""

    def test_epoch_start(self):
        """Test the Unix epoch is zero."""
        assert epoch_millis(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0

    def test_milliseconds(self):
        """Test seconds are scaled to milliseconds."""
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 2, tzinfo=timezone.utc)) == 2000

    def test_now_is_aware(self):
        """Test now_utc returns an aware datetime."""
        assert now_utc().tzinfo is not None


class TestFormatTimestamp:
    """Test display formatting."""

    def test_formats_valid_timestamp(self):
        """Test a valid timestamp is rendered as local date and time."""
        formatted = format_timestamp("2026-10-18T09:30:00.123Z")
        assert len(formatted) == len("2026-10-18 09:30:00")
        assert formatted.startswith("2026-10-1")

    def test_returns_raw_value_when_unparseable(self):
        """Test unparseable values are shown unchanged."""
        assert format_timestamp("not a date") == "not a date"
