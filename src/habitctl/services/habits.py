"""HabitService — due lists, streaks, schedules, and heatmaps.

Five read-only surfaces over a habit snapshot:
- today / date_key: day boundaries from the configured zone and grace period
- dashboard: today's habits plus the overall completion heatmap counts
- habit_detail: one habit with its current streak and completion history
- scheduled_dates: every due day of a habit within a range
- heatmap: Sunday-aligned grid with per-cell intensity levels
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from habitctl.domain.datekey import (
    DAY_NAMES,
    DateKey,
    DateKeyError,
    format_date_key_for_display,
    get_day_of_week,
    normalize_date_key,
    resolve_time_zone,
    subtract_days,
    to_date_key,
)
from habitctl.domain.habits import Habit
from habitctl.domain.heatmap import (
    DAYS_PER_WEEK,
    build_heatmap_grid,
    completion_counts,
    heatmap_intensity,
    heatmap_level,
    normalized_max,
)
from habitctl.domain.schedule import (
    dump_schedule,
    format_schedule_rules,
    get_scheduled_date_keys_in_range,
    is_due_on,
)
from habitctl.domain.streak import calculate_streak
from habitctl.services.base import BaseService
from habitctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class HabitService(BaseService):
    """Read-only habit queries over a snapshot."""

    # ------------------------------------------------------------------
    # today / date_key: day boundaries
    # ------------------------------------------------------------------

    def today(self) -> ServiceResult:
        """Today's key in the configured zone, honouring the grace period."""
        return self.date_key(op="today")

    def date_key(
        self,
        instant_ms: int | None = None,
        *,
        at: str | None = None,
        op: str = "date_key",
    ) -> ServiceResult:
        """Project an instant (default: now) onto the user's calendar day.

        Args:
            instant_ms: Unix milliseconds.
            at: ISO 8601 timestamp; without an offset it is read as local
                time in the configured zone.  Ignored if *instant_ms* is set.
            op: Operation name reported in the result.
        """
        user = self._settings.user
        try:
            if instant_ms is None and at is not None:
                instant_ms = self._parse_instant(at, user.time_zone)
            if instant_ms is None:
                instant_ms = int(datetime.now(UTC).timestamp() * 1000)
            key = to_date_key(instant_ms, user.time_zone, user.grace_minutes)
        except DateKeyError as exc:
            return self._date_error(op, exc)
        except ValueError as exc:
            return self._error(op, "INVALID_INSTANT", str(exc), at=at)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "date_key": key,
                "day_of_week": get_day_of_week(key),
                "weekday": DAY_NAMES[get_day_of_week(key)],
                "display": format_date_key_for_display(key),
                "instant_ms": instant_ms,
                "time_zone": user.time_zone,
                "grace_minutes": user.grace_minutes,
            },
        )

    # ------------------------------------------------------------------
    # dashboard: today's habits and overall heatmap counts
    # ------------------------------------------------------------------

    def dashboard(self, today: str | None = None) -> ServiceResult:
        """Active habits split into due and not due today.

        Both lists put unfinished habits first, then sort by title.
        """
        op = "dashboard"
        try:
            today_key = self._resolve_today(today)
            window_start = subtract_days(
                today_key, self._settings.history.heatmap_weeks * DAYS_PER_WEEK
            )
        except DateKeyError as exc:
            return self._date_error(op, exc)

        due: list[dict[str, Any]] = []
        other: list[dict[str, Any]] = []
        for habit in self._snapshot.active_habits():
            item = self._summary(habit, today_key)
            (due if item["is_due_today"] else other).append(item)

        due.sort(key=_dashboard_order)
        other.sort(key=_dashboard_order)
        counts = completion_counts(self._snapshot.completion_keys(window_start, today_key))

        logger.debug("Dashboard for %s: %d due, %d other", today_key, len(due), len(other))
        return ServiceResult(
            ok=True,
            op=op,
            warnings=self._snapshot_warnings(),
            data={
                "today": today_key,
                "due": due,
                "other": other,
                "due_count": len(due),
                "completed_count": sum(1 for item in due if item["is_completed_today"]),
                "heatmap_start": window_start,
                "heatmap": counts,
            },
        )

    # ------------------------------------------------------------------
    # habit_detail: streak and history for one habit
    # ------------------------------------------------------------------

    def habit_detail(self, habit_id: str, today: str | None = None) -> ServiceResult:
        """One habit with its current streak over the lookback window."""
        op = "habit_detail"
        found = self._find_habit(op, habit_id)
        if isinstance(found, ServiceResult):
            return found
        habit = found

        try:
            today_key = self._resolve_today(today)
            history_start = subtract_days(today_key, self._settings.history.streak_lookback_days)
            scheduled = get_scheduled_date_keys_in_range(habit.schedule, history_start, today_key)
        except DateKeyError as exc:
            return self._date_error(op, exc)

        completed = self._snapshot.completed_dates(habit.id, history_start, today_key)
        streak = calculate_streak(scheduled, completed, today_key)
        completed_sorted = sorted(completed)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": habit.id,
                "title": habit.title,
                "notes": habit.notes,
                "color": habit.color,
                "archived": habit.archived,
                "schedule": format_schedule_rules(habit.schedule),
                "rules": dump_schedule(habit.schedule),
                "today": today_key,
                "is_due_today": is_due_on(today_key, habit.schedule),
                "is_completed_today": today_key in completed,
                "streak": streak,
                "history_start": history_start,
                "scheduled_count": len(scheduled),
                "completed_dates": completed_sorted,
                "heatmap": dict.fromkeys(completed_sorted, 1),
            },
        )

    # ------------------------------------------------------------------
    # scheduled_dates: due days in a range
    # ------------------------------------------------------------------

    def scheduled_dates(self, habit_id: str, start: str, end: str) -> ServiceResult:
        """Every day between *start* and *end* (inclusive) the habit is due."""
        op = "scheduled_dates"
        found = self._find_habit(op, habit_id)
        if isinstance(found, ServiceResult):
            return found
        habit = found

        try:
            start_key = normalize_date_key(start)
            end_key = normalize_date_key(end)
        except DateKeyError as exc:
            return self._date_error(op, exc)
        if start_key > end_key:
            return self._error(
                op,
                "INVALID_RANGE",
                f"Range start {start_key} is after end {end_key}",
                start=start_key,
                end=end_key,
            )

        dates = get_scheduled_date_keys_in_range(habit.schedule, start_key, end_key)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": habit.id,
                "title": habit.title,
                "schedule": format_schedule_rules(habit.schedule),
                "start": start_key,
                "end": end_key,
                "dates": dates,
                "count": len(dates),
            },
        )

    # ------------------------------------------------------------------
    # heatmap: grid with intensity levels
    # ------------------------------------------------------------------

    def heatmap(
        self,
        habit_id: str | None = None,
        *,
        today: str | None = None,
        weeks: int | None = None,
    ) -> ServiceResult:
        """Contribution grid for one habit, or for all habits combined.

        A single habit's cells are binary (done or not); the combined grid
        counts completed habits per day.
        """
        op = "heatmap"
        if weeks is None:
            weeks = self._settings.history.heatmap_weeks
        if weeks < 1:
            return self._error(op, "INVALID_RANGE", f"weeks must be at least 1, got {weeks}")

        habit: Habit | None = None
        if habit_id is not None:
            found = self._find_habit(op, habit_id)
            if isinstance(found, ServiceResult):
                return found
            habit = found

        try:
            today_key = self._resolve_today(today)
            grid = build_heatmap_grid(today_key, weeks)
        except DateKeyError as exc:
            return self._date_error(op, exc)

        counts: dict[DateKey, int]
        if habit is not None:
            counts = dict.fromkeys(
                sorted(self._snapshot.completed_dates(habit.id, grid.start, today_key)), 1
            )
        else:
            counts = completion_counts(self._snapshot.completion_keys(grid.start, today_key))

        ceiling = normalized_max(counts)
        warnings = [] if habit is not None else self._snapshot_warnings()
        levels = [
            [
                None if key is None else heatmap_level(heatmap_intensity(counts.get(key, 0), ceiling))
                for key in row
            ]
            for row in grid.rows
        ]

        return ServiceResult(
            ok=True,
            op=op,
            warnings=warnings,
            data={
                "habit_id": habit.id if habit else None,
                "title": habit.title if habit else None,
                "today": today_key,
                "start": grid.start,
                "weeks": weeks,
                "columns": grid.columns,
                "rows": [list(row) for row in grid.rows],
                "levels": levels,
                "month_labels": [{"month": m, "column": c} for m, c in grid.month_labels],
                "counts": counts,
                "max": ceiling,
                "total": sum(counts.values()),
            },
        )

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_instant(at: str, time_zone: str) -> int:
        """Unix milliseconds for an ISO timestamp, naive values taken as local."""
        try:
            moment = datetime.fromisoformat(at)
        except ValueError as exc:
            msg = f"Invalid ISO 8601 timestamp: {at!r}"
            raise ValueError(msg) from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=resolve_time_zone(time_zone))
        try:
            return int(moment.timestamp() * 1000)
        except (OverflowError, ValueError) as exc:
            msg = f"Timestamp out of range: {at!r}"
            raise ValueError(msg) from exc

    def _summary(self, habit: Habit, today: DateKey) -> dict[str, Any]:
        return {
            "id": habit.id,
            "title": habit.title,
            "color": habit.color,
            "schedule": format_schedule_rules(habit.schedule),
            "is_due_today": is_due_on(today, habit.schedule),
            "is_completed_today": today in self._snapshot.completed_dates(habit.id, today, today),
        }


def _dashboard_order(item: dict[str, Any]) -> tuple[bool, str]:
    return item["is_completed_today"], item["title"].casefold()
