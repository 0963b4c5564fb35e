"""Habit and completion snapshot models.

Habits and completions are owned by an external store.  The engine only
ever sees an immutable snapshot of them and derives values from it.

Field aliases accept both the YAML snapshot keys (``habit``, ``date``) and
the camelCase keys of the store's records (``habitId``, ``dateKey``).
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from habitctl.domain.datekey import DateKey, normalize_date_key
from habitctl.domain.schedule import ScheduleRule

DEFAULT_COLOR = "#22c55e"


class Habit(BaseModel):
    """A recurring habit and its schedule."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    notes: str | None = None
    color: str = DEFAULT_COLOR
    schedule: tuple[ScheduleRule, ...] = ()
    archived_at: int | None = Field(
        default=None,
        validation_alias=AliasChoices("archived_at", "archivedAt"),
    )

    @property
    def archived(self) -> bool:
        return self.archived_at is not None


class Completion(BaseModel):
    """One habit marked done for one calendar day."""

    model_config = {"frozen": True, "populate_by_name": True}

    habit_id: str = Field(validation_alias=AliasChoices("habit_id", "habit", "habitId"))
    date_key: DateKey = Field(validation_alias=AliasChoices("date_key", "date", "dateKey"))
    completed_at: int | None = Field(
        default=None,
        validation_alias=AliasChoices("completed_at", "completedAt"),
    )

    @field_validator("date_key", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        # YAML loaders hand back unquoted dates as date objects.
        if isinstance(value, date):
            return value.isoformat()
        return value

    @field_validator("date_key")
    @classmethod
    def _canonical_key(cls, value: str) -> str:
        return normalize_date_key(value)


class HabitSnapshot(BaseModel):
    """Read-only view of a user's habits and completions."""

    model_config = {"frozen": True}

    habits: tuple[Habit, ...] = ()
    completions: tuple[Completion, ...] = ()

    @model_validator(mode="after")
    def _unique_habit_ids(self) -> HabitSnapshot:
        seen: set[str] = set()
        for habit in self.habits:
            if habit.id in seen:
                msg = f"Duplicate habit id: {habit.id}"
                raise ValueError(msg)
            seen.add(habit.id)
        return self

    def get_habit(self, habit_id: str) -> Habit | None:
        """Look up a habit by id, archived or not."""
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        return None

    def active_habits(self) -> list[Habit]:
        """Habits that have not been archived, in snapshot order."""
        return [h for h in self.habits if not h.archived]

    def completed_dates(
        self,
        habit_id: str,
        start: DateKey | None = None,
        end: DateKey | None = None,
    ) -> frozenset[DateKey]:
        """Days on which *habit_id* was completed, optionally within a range."""
        return frozenset(
            c.date_key
            for c in self.completions
            if c.habit_id == habit_id and _in_range(c.date_key, start, end)
        )

    def unknown_habit_ids(self) -> list[str]:
        """Habit ids referenced by completions but missing from the snapshot."""
        known = {h.id for h in self.habits}
        return sorted({c.habit_id for c in self.completions if c.habit_id not in known})

    def completion_keys(
        self,
        start: DateKey | None = None,
        end: DateKey | None = None,
    ) -> list[DateKey]:
        """One day key per distinct (habit, day) completion, sorted.

        Completions for habits missing from the snapshot are skipped.
        """
        known = {h.id for h in self.habits}
        pairs = {
            (c.habit_id, c.date_key)
            for c in self.completions
            if c.habit_id in known and _in_range(c.date_key, start, end)
        }
        return sorted(key for _, key in pairs)


def _in_range(key: DateKey, start: DateKey | None, end: DateKey | None) -> bool:
    if start is not None and key < start:
        return False
    return end is None or key <= end
