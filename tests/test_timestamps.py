"""
Tests for timestamp utilities.
"""

from datetime import datetime, timedelta, timezone

import pytest

from plugin_protocol.domain.errors import ProtocolError, ValueDecodeError
from plugin_protocol.domain.models import Metric
from plugin_protocol.domain.utils.timestamps import (
    MILLIS_SINCE_JANUARY_FIRST_1978,
    FixedClock,
    interval_duration,
    is_milliseconds,
    resolve_timestamp,
    to_iso8601,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_threshold_constant():
    """Test the threshold is 1978-01-01 midnight US Pacific (08:00Z) in milliseconds."""
    expected = datetime(1978, 1, 1, 8, tzinfo=timezone.utc)
    assert EPOCH + timedelta(milliseconds=MILLIS_SINCE_JANUARY_FIRST_1978) == expected


def test_one_below_threshold_is_seconds():
    """Test 252489599999 is read as seconds."""
    assert is_milliseconds(252489599999) is False
    result = resolve_timestamp(252489599999)
    assert result == EPOCH + timedelta(seconds=252489599999)
    assert result.year > 9000


def test_threshold_is_milliseconds():
    """Test exactly 252489600000 is read as milliseconds."""
    assert is_milliseconds(252489600000) is True
    assert resolve_timestamp(252489600000) == datetime(
        1978, 1, 1, 8, tzinfo=timezone.utc
    )


def test_resolve_unix_seconds():
    """Test parsing Unix timestamp in seconds."""
    # October 15, 2023 16:00:00 UTC
    result = resolve_timestamp(1697385600)
    assert result == datetime(2023, 10, 15, 16, 0, tzinfo=timezone.utc)
    assert result.tzinfo == timezone.utc


def test_resolve_unix_milliseconds():
    """Test parsing Unix timestamp in milliseconds keeps millisecond precision."""
    result = resolve_timestamp(1697385600123)
    assert result == datetime(2023, 10, 15, 16, 0, 0, 123000, tzinfo=timezone.utc)


def test_resolve_epoch_zero():
    """Test Unix epoch zero is read as seconds."""
    assert resolve_timestamp(0) == EPOCH


def test_resolve_negative_seconds():
    """Test negative values (before epoch) are seconds."""
    result = resolve_timestamp(-3600)
    assert result == datetime(1969, 12, 31, 23, 0, tzinfo=timezone.utc)


def test_resolve_missing_uses_clock():
    """Test a missing timestamp falls back to the injected clock."""
    instant = datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)
    assert resolve_timestamp(None, FixedClock(instant)) == instant


def test_resolve_missing_uses_wall_clock_by_default():
    """Test a missing timestamp is read from the wall clock at call time."""
    before = datetime.now(timezone.utc)
    result = resolve_timestamp(None)
    after = datetime.now(timezone.utc)
    assert before <= result <= after


def test_fixed_clock_naive_datetime_is_utc():
    """Test naive instants are interpreted as UTC."""
    clock = FixedClock(datetime(2025, 1, 1))
    assert clock.now().tzinfo == timezone.utc


def test_metric_time():
    """Test Metric.time resolves its own timestamp."""
    metric = Metric(name="m", type="gauge", timestamp=1697385600000)
    assert metric.time() == datetime(2023, 10, 15, 16, 0, tzinfo=timezone.utc)


def test_metric_time_without_timestamp():
    """Test Metric.time uses the clock when the timestamp is absent."""
    instant = datetime(2024, 2, 29, tzinfo=timezone.utc)
    metric = Metric(name="m", type="gauge")
    assert metric.time(FixedClock(instant)) == instant


def test_interval_duration():
    """Test interval.ms converts to a timedelta."""
    assert interval_duration(15000) == timedelta(seconds=15)
    assert interval_duration(1) == timedelta(milliseconds=1)


def test_interval_duration_absent_is_zero():
    """Test a missing interval is a zero duration."""
    assert interval_duration(None) == timedelta(0)
    assert Metric(name="m", type="count").interval_duration() == timedelta(0)


def test_metric_interval_duration():
    """Test Metric.interval_duration reads interval.ms."""
    metric = Metric.model_validate(
        {"name": "m", "type": "count", "interval.ms": 2500}
    )
    assert metric.interval_duration() == timedelta(seconds=2.5)


def test_to_iso8601():
    """Test UTC datetimes render with a Z suffix."""
    dt = datetime(2025, 10, 15, 12, 0, 0, tzinfo=timezone.utc)
    assert to_iso8601(dt) == "2025-10-15T12:00:00Z"


def test_to_iso8601_converts_offsets():
    """Test non-UTC datetimes are converted to UTC."""
    dt = datetime(2025, 10, 15, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_iso8601(dt) == "2025-10-15T12:00:00Z"


def test_resolve_out_of_range_raises_decode_error():
    """Test a timestamp past year 9999 is a per-metric decode error."""
    with pytest.raises(ValueDecodeError, match="out of range"):
        resolve_timestamp(253402300800000)
    with pytest.raises(ValueDecodeError):
        resolve_timestamp(-(2**62))


def test_metric_time_out_of_range():
    """Test Metric.time reports an unrepresentable timestamp as ProtocolError."""
    metric = Metric(name="m", type="gauge", timestamp=253402300800000)
    with pytest.raises(ProtocolError):
        metric.time()


def test_interval_duration_out_of_range():
    """Test an interval too long for a timedelta is a decode error."""
    with pytest.raises(ValueDecodeError):
        interval_duration(2**63 - 1)
