"""Current-streak calculation.

A streak counts consecutive scheduled occurrences that were completed,
walking backward from today.  Unscheduled days neither extend nor break
it.  Today is special: if it is due but not yet done, it is skipped
rather than treated as a miss, so an open day never resets the count.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence

from habitctl.domain.datekey import DateKey


def calculate_streak(
    scheduled_dates: Sequence[DateKey],
    completed_dates: Collection[DateKey],
    today: DateKey,
) -> int:
    """Count completed scheduled days, newest first, up to the first miss.

    Args:
        scheduled_dates: Days the habit was due, ascending.  Days after
            *today* are ignored.
        completed_dates: Days with a recorded completion.
        today: The caller's current day.
    """
    streak = 0
    for date_key in reversed([d for d in scheduled_dates if d <= today]):
        done = date_key in completed_dates
        if date_key == today and not done:
            continue
        if not done:
            break
        streak += 1
    return streak
