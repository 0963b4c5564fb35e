"""Tests for HabitService: dashboard, detail, schedules, and heatmaps."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from habitctl.config.settings import HabitSettings
from habitctl.domain.habits import HabitSnapshot
from habitctl.infrastructure.snapshot import parse_snapshot
from habitctl.services.habits import HabitService

TODAY = "2024-01-05"


@pytest.fixture
def service(snapshot: HabitSnapshot, settings: HabitSettings) -> HabitService:
    return HabitService(snapshot, settings)


def _service_with(snapshot: HabitSnapshot, tmp_path: Path, **overrides: object) -> HabitService:
    return HabitService(snapshot, HabitSettings.from_cli(config_root=tmp_path, **overrides))


class TestDateKey:
    def test_from_milliseconds(self, snapshot: HabitSnapshot, tmp_path: Path) -> None:
        svc = _service_with(snapshot, tmp_path, time_zone="America/New_York", grace_minutes=180)
        instant = datetime(2024, 3, 1, 2, 0, tzinfo=ZoneInfo("America/New_York"))
        result = svc.date_key(int(instant.timestamp() * 1000))
        assert result.ok
        assert result.op == "date_key"
        assert result.data["date_key"] == "2024-02-29"
        assert result.data["weekday"] == "Thu"
        assert result.data["day_of_week"] == 4
        assert result.data["display"] == "Thu, Feb 29"
        assert result.data["time_zone"] == "America/New_York"
        assert result.data["grace_minutes"] == 180

    def test_naive_iso_is_local_time(self, snapshot: HabitSnapshot, tmp_path: Path) -> None:
        svc = _service_with(snapshot, tmp_path, time_zone="America/New_York", grace_minutes=180)
        assert svc.date_key(at="2024-03-01T02:00:00").data["date_key"] == "2024-02-29"
        assert svc.date_key(at="2024-03-01T04:00:00").data["date_key"] == "2024-03-01"

    def test_iso_with_offset(self, service: HabitService) -> None:
        result = service.date_key(at="2024-01-01T01:00:00+05:00")
        assert result.data["date_key"] == "2023-12-31"

    def test_invalid_instant(self, service: HabitService) -> None:
        result = service.date_key(at="yesterday-ish")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INSTANT"
        assert result.error.detail["at"] == "yesterday-ish"

    def test_invalid_time_zone(self, snapshot: HabitSnapshot, tmp_path: Path) -> None:
        svc = _service_with(snapshot, tmp_path, time_zone="Nowhere/Special")
        result = svc.date_key(0)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_TIME_ZONE"
        assert result.error.detail["time_zone"] == "Nowhere/Special"

    def test_milliseconds_out_of_range(self, service: HabitService) -> None:
        result = service.date_key(10**17)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_DATE"

    def test_naive_iso_before_year_1(self, snapshot: HabitSnapshot, tmp_path: Path) -> None:
        svc = _service_with(snapshot, tmp_path, time_zone="Asia/Tokyo")
        result = svc.date_key(at="0001-01-01T00:00:00")
        assert not result.ok
        assert result.error is not None
        assert result.error.code in ("INVALID_INSTANT", "INVALID_DATE")

    def test_today_op(self, service: HabitService) -> None:
        result = service.today()
        assert result.ok
        assert result.op == "today"
        assert len(result.data["date_key"]) == 10


class TestDashboard:
    def test_due_and_other(self, service: HabitService) -> None:
        result = service.dashboard(TODAY)
        assert result.ok
        assert [item["id"] for item in result.data["due"]] == ["gym", "read"]
        assert [item["id"] for item in result.data["other"]] == ["bday", "empty", "rent"]
        assert result.data["due_count"] == 2
        assert result.data["completed_count"] == 1

    def test_archived_excluded(self, service: HabitService) -> None:
        data = service.dashboard(TODAY).data
        ids = {item["id"] for item in data["due"] + data["other"]}
        assert "old" not in ids

    def test_item_fields(self, service: HabitService) -> None:
        gym = service.dashboard(TODAY).data["due"][0]
        assert gym == {
            "id": "gym",
            "title": "Gym",
            "color": "#3b82f6",
            "schedule": "Mon, Wed, Fri",
            "is_due_today": True,
            "is_completed_today": False,
        }

    def test_heatmap_counts(self, service: HabitService) -> None:
        data = service.dashboard(TODAY).data
        assert data["heatmap_start"] == "2023-01-06"
        assert data["heatmap"] == {
            "2024-01-01": 3,
            "2024-01-02": 1,
            "2024-01-03": 2,
            "2024-01-05": 2,
        }

    def test_monday(self, service: HabitService) -> None:
        data = service.dashboard("2024-01-01").data
        assert [item["id"] for item in data["due"]] == ["gym", "rent", "read"]
        assert data["completed_count"] == 3

    def test_malformed_today(self, service: HabitService) -> None:
        result = service.dashboard("2024-1-5")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "MALFORMED_DATE_KEY"
        assert result.error.detail["key"] == "2024-1-5"

    def test_empty_snapshot(self, settings: HabitSettings) -> None:
        result = HabitService(HabitSnapshot(), settings).dashboard(TODAY)
        assert result.ok
        assert result.data["due"] == []
        assert result.data["other"] == []
        assert result.data["heatmap"] == {}


class TestHabitDetail:
    def test_streak_broken_by_missed_day(self, service: HabitService) -> None:
        result = service.habit_detail("read", TODAY)
        assert result.ok
        assert result.data["streak"] == 1
        assert result.data["is_due_today"] is True
        assert result.data["is_completed_today"] is True

    def test_open_today_keeps_streak(self, service: HabitService) -> None:
        result = service.habit_detail("read", "2024-01-04")
        assert result.data["streak"] == 3
        assert result.data["is_completed_today"] is False

    def test_weekly_streak(self, service: HabitService) -> None:
        assert service.habit_detail("gym", TODAY).data["streak"] == 2

    def test_fields(self, service: HabitService) -> None:
        data = service.habit_detail("gym", TODAY).data
        assert data["title"] == "Gym"
        assert data["notes"] == "Leg day on Fridays."
        assert data["schedule"] == "Mon, Wed, Fri"
        assert data["rules"] == [{"kind": "weekly", "weekdays": [1, 3, 5]}]
        assert data["history_start"] == "2023-01-05"
        assert data["completed_dates"] == ["2024-01-01", "2024-01-03"]
        assert data["heatmap"] == {"2024-01-01": 1, "2024-01-03": 1}
        assert data["archived"] is False

    def test_scheduled_count_covers_lookback(self, service: HabitService) -> None:
        # 2023-01-05 through 2024-01-05 inclusive.
        assert service.habit_detail("read", TODAY).data["scheduled_count"] == 366

    def test_archived_habit_still_viewable(self, service: HabitService) -> None:
        data = service.habit_detail("old", TODAY).data
        assert data["archived"] is True
        assert data["streak"] == 1

    def test_empty_schedule(self, service: HabitService) -> None:
        data = service.habit_detail("empty", TODAY).data
        assert data["schedule"] == "No schedule"
        assert data["streak"] == 0
        assert data["is_due_today"] is False

    def test_lookback_from_settings(self, snapshot: HabitSnapshot, tmp_path: Path) -> None:
        (tmp_path / "habitctl.toml").write_text(
            "[history]\nstreak_lookback_days = 2\n", encoding="utf-8"
        )
        svc = _service_with(snapshot, tmp_path, time_zone="UTC")
        data = svc.habit_detail("read", "2024-01-04").data
        assert data["history_start"] == "2024-01-02"
        assert data["streak"] == 2

    def test_not_found(self, service: HabitService) -> None:
        result = service.habit_detail("nope", TODAY)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"id": "nope"}


class TestScheduledDates:
    def test_weekly(self, service: HabitService) -> None:
        result = service.scheduled_dates("gym", "2024-01-01", "2024-01-14")
        assert result.ok
        assert result.data["dates"] == [
            "2024-01-01",
            "2024-01-03",
            "2024-01-05",
            "2024-01-08",
            "2024-01-10",
            "2024-01-12",
        ]
        assert result.data["count"] == 6

    def test_yearly_across_years(self, service: HabitService) -> None:
        dates = service.scheduled_dates("bday", "2023-01-01", "2025-12-31").data["dates"]
        assert dates == ["2023-03-05", "2024-03-05", "2025-03-05"]

    def test_single_day(self, service: HabitService) -> None:
        assert service.scheduled_dates("rent", "2024-02-01", "2024-02-01").data["count"] == 1

    def test_reversed_range(self, service: HabitService) -> None:
        result = service.scheduled_dates("gym", "2024-01-14", "2024-01-01")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_RANGE"

    def test_malformed_bound(self, service: HabitService) -> None:
        result = service.scheduled_dates("gym", "2024-01-01", "soon")
        assert result.error is not None
        assert result.error.code == "MALFORMED_DATE_KEY"

    def test_not_found(self, service: HabitService) -> None:
        result = service.scheduled_dates("nope", "2024-01-01", "2024-01-02")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestHeatmap:
    def test_all_habits(self, service: HabitService) -> None:
        result = service.heatmap(today=TODAY, weeks=1)
        assert result.ok
        data = result.data
        assert data["habit_id"] is None
        assert data["start"] == "2023-12-24"
        assert data["columns"] == 2
        assert data["max"] == 3
        assert data["total"] == 8
        # Monday column 1 is 2024-01-01 with 3 completions.
        assert data["rows"][1][1] == "2024-01-01"
        assert data["levels"][1][1] == 4
        assert data["levels"][2][1] == 2
        assert data["levels"][3][1] == 3
        assert data["levels"][4][1] == 0
        assert data["levels"][6][1] is None
        assert data["month_labels"] == [
            {"month": "Dec", "column": 0},
            {"month": "Jan", "column": 1},
        ]

    def test_single_habit_is_binary(self, service: HabitService) -> None:
        data = service.heatmap("gym", today=TODAY, weeks=1).data
        assert data["title"] == "Gym"
        assert data["counts"] == {"2024-01-01": 1, "2024-01-03": 1}
        assert data["max"] == 1
        assert data["levels"][1][1] == 4
        assert data["levels"][5][1] == 0

    def test_default_weeks_from_settings(self, service: HabitService) -> None:
        data = service.heatmap(today=TODAY).data
        assert data["weeks"] == 52
        assert data["columns"] == 53

    def test_no_completions_all_zero(self, settings: HabitSettings) -> None:
        data = HabitService(HabitSnapshot(), settings).heatmap(today=TODAY, weeks=2).data
        assert data["max"] == 1
        assert data["total"] == 0
        assert {level for row in data["levels"] for level in row} <= {0, None}

    def test_zero_weeks(self, service: HabitService) -> None:
        result = service.heatmap(today=TODAY, weeks=0)
        assert result.error is not None
        assert result.error.code == "INVALID_RANGE"

    def test_not_found(self, service: HabitService) -> None:
        result = service.heatmap("nope", today=TODAY)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestUnknownHabitCompletions:
    @pytest.fixture
    def orphaned(self, sample_yaml: str, settings: HabitSettings) -> HabitService:
        text = sample_yaml + "  - {habit: ghost, date: 2024-01-01}\n"
        return HabitService(parse_snapshot(text), settings)

    def test_dashboard_warns(self, orphaned: HabitService) -> None:
        result = orphaned.dashboard(TODAY)
        assert result.ok
        assert result.warnings == ["Skipped completions for unknown habit 'ghost'"]
        assert result.data["heatmap"]["2024-01-01"] == 3

    def test_combined_heatmap_warns_and_skips(self, orphaned: HabitService) -> None:
        result = orphaned.heatmap(today=TODAY, weeks=1)
        assert result.warnings == ["Skipped completions for unknown habit 'ghost'"]
        assert result.data["total"] == 8
        assert result.data["max"] == 3

    def test_single_habit_heatmap_has_no_warning(self, orphaned: HabitService) -> None:
        assert orphaned.heatmap("gym", today=TODAY, weeks=1).warnings == []

    def test_clean_snapshot_has_no_warning(self, service: HabitService) -> None:
        assert service.dashboard(TODAY).warnings == []
