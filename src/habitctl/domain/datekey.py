"""Calendar-day keys and day arithmetic.

A DateKey is a ``YYYY-MM-DD`` string.  Zero padding makes plain string
comparison chronological, so keys sort and compare without parsing.

Day boundaries are computed once, in :func:`to_date_key`, from an instant,
an IANA zone, and a grace period.  Everything after that is pure calendar
arithmetic on the key itself: no timezone or time-of-day survives.

Parsing is permissive about day-of-month: ``2024-02-31`` parses, and the
arithmetic functions carry it forward (to ``2024-03-02``) the way a generic
date object normalises overflowing fields.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DateKey = str

DATE_KEY_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")

DAY_NAMES: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MONTH_NAMES: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MS_PER_MINUTE = 60_000


# --- Errors ---


class DateKeyError(ValueError):
    """Base class for date key failures."""


class MalformedDateKey(DateKeyError):
    """The string is not a ``YYYY-MM-DD`` key with in-range components."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Malformed date key: {key!r} (expected YYYY-MM-DD)")


class InvalidTimeZone(DateKeyError):
    """The IANA timezone name is not known."""

    def __init__(self, time_zone: object) -> None:
        self.time_zone = time_zone
        super().__init__(f"Unknown time zone: {time_zone!r}")


# --- Construction ---


def to_date_key(instant_ms: int, time_zone: str, grace_minutes: int = 0) -> DateKey:
    """Project a Unix millisecond instant onto a local calendar day.

    The grace period is subtracted from the instant *before* the timezone
    projection, so with ``grace_minutes=180`` anything up to 03:00 local
    still belongs to the previous day.

    Raises:
        InvalidTimeZone: If *time_zone* is not a known IANA name.
        DateKeyError: If the local day falls outside years 1 to 9999.
    """
    zone = resolve_time_zone(time_zone)
    adjusted_ms = instant_ms - grace_minutes * _MS_PER_MINUTE
    try:
        instant = _EPOCH + timedelta(milliseconds=adjusted_ms)
        return instant.astimezone(zone).date().isoformat()
    except (OverflowError, ValueError) as exc:
        raise DateKeyError(f"Instant out of range: {instant_ms} ms") from exc


def today_date_key(
    time_zone: str,
    grace_minutes: int = 0,
    *,
    now_ms: int | None = None,
) -> DateKey:
    """Today's key for a user, from the current clock unless *now_ms* is given."""
    if now_ms is None:
        now_ms = int(datetime.now(UTC).timestamp() * 1000)
    return to_date_key(now_ms, time_zone, grace_minutes)


def parse_date_key(key: str) -> tuple[int, int, int]:
    """Split a key into ``(year, month, day)``.

    Month must be 1-12 and day 1-31.  The day is *not* checked against the
    length of its month.

    Raises:
        MalformedDateKey: On any shape or range violation.
    """
    if not isinstance(key, str):
        raise MalformedDateKey(key)
    match = DATE_KEY_PATTERN.fullmatch(key)
    if match is None:
        raise MalformedDateKey(key)
    year, month, day = (int(part) for part in match.groups())
    if year < 1 or not 1 <= month <= 12 or not 1 <= day <= 31:
        raise MalformedDateKey(key)
    return year, month, day


def format_date_key(year: int, month: int, day: int) -> DateKey:
    """Build a key from components, carrying overflow through the calendar.

    ``format_date_key(2024, 13, 1)`` is ``"2025-01-01"`` and
    ``format_date_key(2024, 3, 0)`` is ``"2024-02-29"``.
    """
    return _from_ordinal(_ordinal(year, month, day))


def normalize_date_key(key: DateKey) -> DateKey:
    """Canonical form of *key* (``2023-02-29`` becomes ``2023-03-01``)."""
    return _from_ordinal(_key_ordinal(key))


# --- Calendar arithmetic ---


def get_day_of_week(key: DateKey) -> int:
    """Day of week for *key*, 0 = Sunday through 6 = Saturday."""
    return date.fromordinal(_key_ordinal(key)).isoweekday() % 7


def add_days(key: DateKey, days: int) -> DateKey:
    """Move *key* forward by *days* (backward when negative)."""
    return _from_ordinal(_key_ordinal(key) + days)


def subtract_days(key: DateKey, days: int) -> DateKey:
    """Move *key* backward by *days* (forward when negative)."""
    return add_days(key, -days)


def date_key_range(start: DateKey, end: DateKey) -> list[DateKey]:
    """All keys from *start* to *end* inclusive, ascending.

    Empty when *start* is after *end*.
    """
    first = _key_ordinal(start)
    last = _key_ordinal(end)
    return [_from_ordinal(n) for n in range(first, last + 1)]


def days_between(start: DateKey, end: DateKey) -> int:
    """Signed number of calendar days from *start* to *end*."""
    return _key_ordinal(end) - _key_ordinal(start)


def is_past_or_today(key: DateKey, today: DateKey) -> bool:
    """Check whether *key* falls on or before *today*."""
    return key <= today


# --- Display ---


def get_month_name(key: DateKey) -> str:
    """Short English month name for *key* (``"Jan"``)."""
    return MONTH_NAMES[date.fromordinal(_key_ordinal(key)).month - 1]


def format_date_key_for_display(key: DateKey) -> str:
    """Short display form, e.g. ``"Mon, Jan 1"``."""
    day = date.fromordinal(_key_ordinal(key))
    weekday = DAY_NAMES[day.isoweekday() % 7]
    return f"{weekday}, {MONTH_NAMES[day.month - 1]} {day.day}"


# --- Time zones ---


def resolve_time_zone(time_zone: str) -> ZoneInfo:
    """Look up an IANA zone.

    Raises:
        InvalidTimeZone: If the name is empty or unknown.
    """
    if not isinstance(time_zone, str) or not time_zone:
        raise InvalidTimeZone(time_zone)
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimeZone(time_zone) from exc


# --- Internals ---


def _ordinal(year: int, month: int, day: int) -> int:
    """Proleptic Gregorian ordinal, normalising month and day overflow."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        first = date(year, month, 1).toordinal()
    except ValueError as exc:
        raise DateKeyError(f"Date out of range: year {year}") from exc
    return first + day - 1


def _key_ordinal(key: DateKey) -> int:
    return _ordinal(*parse_date_key(key))


def _from_ordinal(ordinal: int) -> DateKey:
    try:
        return date.fromordinal(ordinal).isoformat()
    except (ValueError, OverflowError) as exc:
        raise DateKeyError(f"Date out of range: ordinal {ordinal}") from exc
