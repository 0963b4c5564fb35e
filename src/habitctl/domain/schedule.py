"""Recurrence rules and schedule evaluation.

A habit's schedule is an ordered list of rules.  Order only matters for
display: a day is *due* when any rule fires on it, and an empty schedule
is never due.

Rules persist as records tagged by ``kind``::

    {"kind": "daily"}
    {"kind": "weekly", "weekdays": [1, 3, 5]}        # 0 = Sunday
    {"kind": "monthly", "daysOfMonth": [1, 15]}
    {"kind": "yearly", "month": 3, "day": 5}

:func:`parse_schedule` and :func:`dump_schedule` convert between that wire
shape and the frozen models below.  Monthly rules are never clamped: day 31
simply does not fire in a 30-day month.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from habitctl.domain.datekey import (
    DAY_NAMES,
    MONTH_NAMES,
    DateKey,
    date_key_range,
    get_day_of_week,
    normalize_date_key,
    parse_date_key,
)

Weekday = Annotated[int, Field(ge=0, le=6)]
DayOfMonth = Annotated[int, Field(ge=1, le=31)]

_ALL_WEEKDAYS = frozenset(range(7))
_WORKWEEK = frozenset({1, 2, 3, 4, 5})
_WEEKEND = frozenset({0, 6})
_ALL_MONTH_DAYS = frozenset(range(1, 32))

NO_SCHEDULE = "No schedule"
EVERY_DAY = "Every day"


# --- Rule variants ---


class DailyRule(BaseModel):
    """Fires every day."""

    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["daily"] = "daily"


class WeeklyRule(BaseModel):
    """Fires when the day of week is in ``weekdays`` (0 = Sunday)."""

    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["weekly"] = "weekly"
    weekdays: tuple[Weekday, ...]


class MonthlyRule(BaseModel):
    """Fires when the day of month is in ``days_of_month``."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    kind: Literal["monthly"] = "monthly"
    days_of_month: tuple[DayOfMonth, ...] = Field(alias="daysOfMonth")


class YearlyRule(BaseModel):
    """Fires on one fixed month and day each year."""

    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["yearly"] = "yearly"
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)


ScheduleRule = Annotated[
    DailyRule | WeeklyRule | MonthlyRule | YearlyRule,
    Field(discriminator="kind"),
]

_RULE_ADAPTER: TypeAdapter[Any] = TypeAdapter(ScheduleRule)
_SCHEDULE_ADAPTER: TypeAdapter[Any] = TypeAdapter(list[ScheduleRule])


# --- Wire codec ---


def parse_schedule_rule(raw: Any) -> ScheduleRule:
    """Validate one persisted rule record.

    Raises:
        pydantic.ValidationError: Unknown ``kind`` or out-of-range payload.
    """
    return _RULE_ADAPTER.validate_python(raw)


def parse_schedule(raw: Any) -> list[ScheduleRule]:
    """Validate a persisted list of rule records, preserving order."""
    return _SCHEDULE_ADAPTER.validate_python(raw)


def dump_schedule(rules: Iterable[ScheduleRule]) -> list[dict[str, Any]]:
    """Serialize rules back to their persisted record shape."""
    return [rule.model_dump(mode="json", by_alias=True) for rule in rules]


# --- Evaluation ---


def occurs_on(date_key: DateKey, rule: ScheduleRule) -> bool:
    """Check whether a single *rule* fires on *date_key*.

    Keys naming a non-existent day (``2024-04-31``) are evaluated as the day
    they normalise to.
    """
    key = normalize_date_key(date_key)
    _, month, day = parse_date_key(key)

    if isinstance(rule, DailyRule):
        return True
    if isinstance(rule, WeeklyRule):
        return get_day_of_week(key) in rule.weekdays
    if isinstance(rule, MonthlyRule):
        return day in rule.days_of_month
    if isinstance(rule, YearlyRule):
        return rule.month == month and rule.day == day
    msg = f"Unsupported schedule rule: {rule!r}"
    raise TypeError(msg)


def is_due_on(date_key: DateKey, rules: Iterable[ScheduleRule]) -> bool:
    """Check whether any of *rules* fires on *date_key*."""
    return any(occurs_on(date_key, rule) for rule in rules)


def get_scheduled_date_keys_in_range(
    rules: Sequence[ScheduleRule],
    start: DateKey,
    end: DateKey,
) -> list[DateKey]:
    """All due days between *start* and *end* inclusive, ascending."""
    return [key for key in date_key_range(start, end) if is_due_on(key, rules)]


# --- Display ---


def ordinal(n: int) -> str:
    """English ordinal for *n*: ``1st``, ``2nd``, ``11th``, ``23rd``."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_schedule_rule(rule: ScheduleRule) -> str:
    """Human-readable summary of one rule."""
    if isinstance(rule, DailyRule):
        return EVERY_DAY
    if isinstance(rule, WeeklyRule):
        days = frozenset(rule.weekdays)
        if not days:
            return "No days selected"
        if days == _ALL_WEEKDAYS:
            return EVERY_DAY
        if days == _WORKWEEK:
            return "Weekdays"
        if days == _WEEKEND:
            return "Weekends"
        return ", ".join(DAY_NAMES[d] for d in dict.fromkeys(rule.weekdays))
    if isinstance(rule, MonthlyRule):
        days = frozenset(rule.days_of_month)
        if not days:
            return "No days selected"
        if days == _ALL_MONTH_DAYS:
            return EVERY_DAY
        return "Monthly on " + ", ".join(ordinal(d) for d in dict.fromkeys(rule.days_of_month))
    if isinstance(rule, YearlyRule):
        return f"Yearly on {MONTH_NAMES[rule.month - 1]} {rule.day}"
    msg = f"Unsupported schedule rule: {rule!r}"
    raise TypeError(msg)


def format_schedule_rules(rules: Sequence[ScheduleRule]) -> str:
    """Summary of a whole schedule, rules joined with ``" + "``."""
    if not rules:
        return NO_SCHEDULE
    return " + ".join(format_schedule_rule(rule) for rule in rules)
