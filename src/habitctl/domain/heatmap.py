"""Contribution-style heatmap layout and intensity scaling.

The grid has seven rows (Sunday..Saturday) and one column per calendar
week.  It covers the last ``weeks * 7`` days ending today, widened back to
the preceding Sunday so every column starts on row 0.  Cells after today
are empty.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from habitctl.domain.datekey import (
    DateKey,
    add_days,
    days_between,
    get_day_of_week,
    get_month_name,
    parse_date_key,
    subtract_days,
)

DAYS_PER_WEEK = 7
DEFAULT_LEVELS = 4


@dataclass(frozen=True)
class HeatmapGrid:
    """Sunday-aligned day grid ending at ``today``.

    Attributes:
        start: First cell (always a Sunday).
        today: Last non-empty cell.
        rows: Seven rows, Sunday first; ``None`` marks a day after today.
        month_labels: ``(month abbreviation, column)`` at each month change.
    """

    start: DateKey
    today: DateKey
    rows: tuple[tuple[DateKey | None, ...], ...]
    month_labels: tuple[tuple[str, int], ...]

    @property
    def columns(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def cells(self) -> Iterator[DateKey]:
        """Non-empty cells in chronological order."""
        for col in range(self.columns):
            for row in self.rows:
                key = row[col]
                if key is not None:
                    yield key


def build_heatmap_grid(today: DateKey, weeks: int) -> HeatmapGrid:
    """Lay out *weeks* worth of days ending at *today*.

    Raises:
        ValueError: If *weeks* is less than 1.
    """
    if weeks < 1:
        msg = f"weeks must be at least 1, got {weeks}"
        raise ValueError(msg)

    raw_start = subtract_days(today, weeks * DAYS_PER_WEEK - 1)
    start = subtract_days(raw_start, get_day_of_week(raw_start))
    columns = days_between(start, today) // DAYS_PER_WEEK + 1

    rows: list[list[DateKey | None]] = [[] for _ in range(DAYS_PER_WEEK)]
    labels: list[tuple[str, int]] = []
    last_month: tuple[int, int] | None = None

    for col in range(columns):
        for row in range(DAYS_PER_WEEK):
            key = add_days(start, col * DAYS_PER_WEEK + row)
            if key > today:
                rows[row].append(None)
                continue
            year, month, _ = parse_date_key(key)
            if (year, month) != last_month:
                last_month = (year, month)
                labels.append((get_month_name(key), col))
            rows[row].append(key)

    return HeatmapGrid(
        start=start,
        today=today,
        rows=tuple(tuple(r) for r in rows),
        month_labels=tuple(labels),
    )


def completion_counts(
    date_keys: Iterable[DateKey],
    start: DateKey | None = None,
    end: DateKey | None = None,
) -> dict[DateKey, int]:
    """Number of completions per day, optionally clipped to a range."""
    counts: Counter[DateKey] = Counter()
    for key in date_keys:
        if start is not None and key < start:
            continue
        if end is not None and key > end:
            continue
        counts[key] += 1
    return dict(counts)


def normalized_max(counts: Mapping[DateKey, int], max_value: int | None = None) -> int:
    """Scale ceiling: *max_value* if given, else the largest count (at least 1)."""
    if max_value is not None:
        return max_value
    return max([*counts.values(), 1])


def heatmap_intensity(value: float, max_value: float) -> float:
    """Fraction of the scale ceiling, 0 when the ceiling is not positive."""
    if max_value <= 0:
        return 0.0
    return value / max_value


def heatmap_level(intensity: float, levels: int = DEFAULT_LEVELS) -> int:
    """Bucket an intensity into ``0`` (empty) or ``1..levels``."""
    if intensity <= 0:
        return 0
    return min(int(intensity * levels), levels - 1) + 1
