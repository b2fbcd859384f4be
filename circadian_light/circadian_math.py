"""
Numeric and time helpers shared by every model.

Covers input validation, display rounding, clamping, and conversion of
epoch-millisecond timestamps into local hours of the day.
"""

import math
from datetime import datetime
from typing import Any, Optional

import pytz

from .config import settings


def is_valid_number(value: Any) -> bool:
    """True for a finite int/float. Booleans, None, strings, NaN and inf are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with halves going up (2.5 -> 3, -2.5 -> -2).

    Python's round() uses banker's rounding; display values here need the
    conventional behaviour so 0.5 boundaries are stable.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """round_half_up() returning an int."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def normalize_channel(value: float) -> float:
    """Clamp an 8-bit channel to [0, 255] and scale to [0, 1]."""
    return clamp(value, 0, 255) / 255


def time_decimal(dt: datetime) -> float:
    """Convert a datetime to decimal hours (e.g. 07:30 -> 7.5)."""
    return dt.hour + dt.minute / 60


def timestamp_to_local(timestamp_ms: float, tz_name: Optional[str] = None) -> datetime:
    """
    Convert epoch milliseconds to a naive local datetime.

    Args:
        timestamp_ms: Milliseconds since the Unix epoch
        tz_name: IANA timezone name, defaults to the configured timezone

    Returns:
        Local datetime (naive, for hour-of-day comparisons)
    """
    tz = pytz.timezone(tz_name or settings.timezone)
    utc_dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=pytz.UTC)
    return utc_dt.astimezone(tz).replace(tzinfo=None)


def hour_of_timestamp(timestamp_ms: Any, tz_name: Optional[str] = None) -> Optional[int]:
    """
    Local hour (0-23) of an epoch-millisecond timestamp.

    Returns None for missing, zero or non-numeric timestamps so history
    consumers can skip the entry.
    """
    if not is_valid_number(timestamp_ms) or not timestamp_ms:
        return None
    try:
        return timestamp_to_local(timestamp_ms, tz_name).hour
    except (OverflowError, OSError, ValueError):
        return None


def get_current_datetime_in_tz(tz_name: Optional[str] = None) -> datetime:
    """
    Get current datetime in the specified timezone.

    This is the only place the engine reads the wall clock. Calculation
    functions take the time explicitly; call sites use this to supply it.

    Args:
        tz_name: IANA timezone name, defaults to the configured timezone

    Returns:
        Current datetime in the specified timezone (naive, for local comparisons)
    """
    tz = pytz.timezone(tz_name or settings.timezone)
    now_utc = datetime.now(pytz.UTC)
    now_local = now_utc.astimezone(tz)
    return now_local.replace(tzinfo=None)


def current_timestamp_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(datetime.now(pytz.UTC).timestamp() * 1000)
