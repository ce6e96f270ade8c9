"""
Timestamp normalization utilities.

Integrations send metric timestamps as bare integers, some in seconds and some
in milliseconds since the epoch, without saying which. The unit is inferred
from the magnitude of the value.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, Union

from ..errors import ValueDecodeError

# 1978-01-01T00:00:00 US Pacific (08:00Z) in milliseconds. Any millisecond
# timestamp after that date is larger than any seconds timestamp for the next
# several millennia.
MILLIS_SINCE_JANUARY_FIRST_1978 = 252_489_600_000

# wire timestamps and intervals are signed 64-bit integers
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        raise NotImplementedError


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant; useful for replay and tests."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


SYSTEM_CLOCK = SystemClock()


def is_milliseconds(value: Union[int, float]) -> bool:
    """
    Return True when ``value`` should be read as milliseconds since epoch.

    Examples
    --------
    >>> is_milliseconds(252489599999)
    False
    >>> is_milliseconds(252489600000)
    True
    """
    return value >= MILLIS_SINCE_JANUARY_FIRST_1978


def resolve_timestamp(
    value: Optional[Union[int, float]], clock: Optional[Clock] = None
) -> datetime:
    """
    Resolve an optional seconds-or-milliseconds timestamp to a UTC datetime.

    Parameters
    ----------
    value : int, float, or None
        Raw timestamp from the payload.
    clock : Clock, optional
        Time source used when ``value`` is None. Defaults to the system clock.

    Returns
    -------
    datetime
        Timezone-aware datetime in UTC.

    Raises
    ------
    ValueDecodeError
        If the value lies outside the range a datetime can represent
        (roughly years 1 to 9999).

    Examples
    --------
    >>> resolve_timestamp(1697385600)
    datetime.datetime(2023, 10, 15, 16, 0, tzinfo=datetime.timezone.utc)
    >>> resolve_timestamp(1697385600000)
    datetime.datetime(2023, 10, 15, 16, 0, tzinfo=datetime.timezone.utc)
    """
    if value is None:
        return (clock or SYSTEM_CLOCK).now()

    # timedelta keeps integer milliseconds exact
    try:
        if is_milliseconds(value):
            return _EPOCH + timedelta(milliseconds=value)
        return _EPOCH + timedelta(seconds=value)
    except OverflowError as exc:
        raise ValueDecodeError(f"timestamp {value} is out of range") from exc


def interval_duration(interval_ms: Optional[Union[int, float]]) -> timedelta:
    """
    Convert an optional ``interval.ms`` value to a duration.

    Examples
    --------
    >>> interval_duration(None)
    datetime.timedelta(0)
    >>> interval_duration(1500)
    datetime.timedelta(seconds=1, microseconds=500000)
    """
    if interval_ms is None:
        return timedelta(0)
    try:
        return timedelta(milliseconds=interval_ms)
    except OverflowError as exc:
        raise ValueDecodeError(f"interval {interval_ms}ms is out of range") from exc


def to_iso8601(dt: datetime) -> str:
    """
    Convert datetime to ISO8601 string with 'Z' suffix for UTC.

    Examples
    --------
    >>> to_iso8601(datetime(2025, 10, 15, 12, 0, 0, tzinfo=timezone.utc))
    '2025-10-15T12:00:00Z'
    """
    if dt.tzinfo != timezone.utc:
        dt = dt.astimezone(timezone.utc)

    iso_str = dt.isoformat()
    if iso_str.endswith("+00:00"):
        iso_str = iso_str[:-6] + "Z"
    return iso_str
