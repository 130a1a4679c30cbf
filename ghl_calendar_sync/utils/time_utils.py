"""
Time normalization helpers.

All defaulting rules for remote duration fields live in normalize_duration:
a missing value is 0 and a missing unit is minutes. Open hours arrive as
wall-clock times in the location's timezone and are stored in UTC.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional, Tuple, Union

import pytz
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from ..constants import UTC_ZONE, DurationUnit
from ..exceptions import ErrorCode, ValidationError
from .logger import get_logger

SECONDS_PER_UNIT = {
    DurationUnit.MINUTES.value: 60,
    DurationUnit.HOURS.value: 3600,
    DurationUnit.DAYS.value: 86400,
}

# Spellings seen in remote payloads besides the canonical ones
UNIT_ALIASES = {
    "min": DurationUnit.MINUTES.value,
    "minute": DurationUnit.MINUTES.value,
    "minutes": DurationUnit.MINUTES.value,
    "hour": DurationUnit.HOURS.value,
    "hrs": DurationUnit.HOURS.value,
    "day": DurationUnit.DAYS.value,
}


def normalize_duration(value: Any, unit: Optional[str] = None) -> int:
    """
    Convert a remote duration into seconds.

    Args:
        value: Numeric amount; None or empty counts as 0
        unit: "mins", "hours" or "days"; None or empty counts as minutes

    Returns:
        Duration in whole seconds

    Raises:
        ValidationError: If the value is not numeric or the unit is unknown
    """
    if value is None or value == "":
        return 0

    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Duration value is not numeric: {value!r}",
            field="duration",
            error_code=ErrorCode.INVALID_FORMAT,
            cause=e,
        )

    key = (unit or DurationUnit.MINUTES.value).strip().lower()
    key = UNIT_ALIASES.get(key, key)
    if key not in SECONDS_PER_UNIT:
        raise ValidationError(
            f"Unknown duration unit: {unit!r}",
            field="duration_unit",
            error_code=ErrorCode.INVALID_FORMAT,
            value=unit,
        )

    return int(round(amount * SECONDS_PER_UNIT[key]))


def resolve_timezone(tz_name: Optional[str], default: str = UTC_ZONE) -> str:
    """
    Return tz_name if pytz knows it, otherwise the default.

    Unknown names are logged rather than raised so a bad profile value
    degrades to storing hours unconverted instead of failing the sync.
    """
    if not tz_name:
        return default
    try:
        pytz.timezone(tz_name)
        return tz_name
    except pytz.UnknownTimeZoneError:
        get_logger().warning(
            "Unknown timezone, falling back to default",
            extra={"timezone": tz_name, "default": default},
        )
        return default


def wall_clock_to_utc(
    hour: int, minute: int, tz_name: str, on_date: Optional[date] = None
) -> Tuple[int, int]:
    """
    Convert a wall-clock time in tz_name to a UTC (hour, minute) pair.

    The offset is taken for on_date (today in tz_name when omitted), so the
    result follows daylight saving time on that date. Hour 24 means midnight
    at the end of the day.
    """
    zone = pytz.timezone(tz_name)
    if on_date is None:
        on_date = datetime.now(zone).date()

    local_naive = datetime.combine(on_date, time()) + timedelta(hours=hour, minutes=minute)
    local_aware = zone.localize(local_naive)
    in_utc = local_aware.astimezone(pytz.utc)
    return in_utc.hour, in_utc.minute


def to_epoch_seconds(value: Union[str, int, float, datetime, None]) -> Optional[int]:
    """
    Convert a remote timestamp to UTC epoch seconds.

    Numbers are epoch milliseconds, strings are ISO-8601 (naive means UTC).
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        raise ValidationError(
            f"Unsupported timestamp: {value!r}", field="timestamp", error_code=ErrorCode.INVALID_FORMAT
        )

    if isinstance(value, (int, float)):
        return int(value // 1000)

    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = date_parser.isoparse(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Unparseable timestamp: {value!r}",
                field="timestamp",
                error_code=ErrorCode.INVALID_FORMAT,
                cause=e,
            )

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def to_epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def booking_window(now: datetime, years: int = 1) -> Tuple[int, int]:
    """
    Return (start, end) in epoch milliseconds for a window starting at now
    and ending the same wall-clock moment ``years`` calendar years later.
    """
    return to_epoch_millis(now), to_epoch_millis(now + relativedelta(years=years))


def seconds_since(moment: datetime, now: datetime) -> float:
    """
    Elapsed seconds between moment and now.

    Naive datetimes (SQLite drops tzinfo) are treated as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - moment).total_seconds()
