"""BaseService — shared foundation for habitctl services.

Every service receives an immutable :class:`HabitSnapshot` and the frozen
:class:`HabitSettings` at construction time.  Services never mutate
either; they only derive results from them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from habitctl.domain.datekey import (
    DateKey,
    DateKeyError,
    InvalidTimeZone,
    MalformedDateKey,
    normalize_date_key,
    today_date_key,
)
from habitctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from habitctl.config.settings import HabitSettings
    from habitctl.domain.habits import Habit, HabitSnapshot

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class HabitService(BaseService):
            def dashboard(self, today: str | None = None) -> ServiceResult:
                today_key = self._resolve_today(today)
                ...
    """

    def __init__(self, snapshot: HabitSnapshot, settings: HabitSettings) -> None:
        self._snapshot = snapshot
        self._settings = settings

    def _resolve_today(self, today: str | None) -> DateKey:
        """Caller-supplied *today*, or today in the configured zone.

        Raises:
            DateKeyError: Malformed *today* or unknown configured zone.
        """
        if today is not None:
            return normalize_date_key(today)
        user = self._settings.user
        return today_date_key(user.time_zone, user.grace_minutes)

    def _find_habit(self, op: str, habit_id: str) -> Habit | ServiceResult:
        """Return the habit, or a NOT_FOUND result if the id is unknown."""
        habit = self._snapshot.get_habit(habit_id)
        if habit is None:
            return self._error(op, "NOT_FOUND", f"No habit with id {habit_id!r}", id=habit_id)
        return habit

    def _snapshot_warnings(self) -> list[str]:
        """One warning per habit id that completions reference but no habit has."""
        warnings = [
            f"Skipped completions for unknown habit {habit_id!r}"
            for habit_id in self._snapshot.unknown_habit_ids()
        ]
        for warning in warnings:
            logger.debug(warning)
        return warnings

    @staticmethod
    def _error(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    @classmethod
    def _date_error(cls, op: str, exc: DateKeyError) -> ServiceResult:
        """Translate a date key failure into an error result."""
        logger.debug("%s failed: %s", op, exc)
        if isinstance(exc, MalformedDateKey):
            return cls._error(op, "MALFORMED_DATE_KEY", str(exc), key=str(exc.key))
        if isinstance(exc, InvalidTimeZone):
            return cls._error(op, "INVALID_TIME_ZONE", str(exc), time_zone=str(exc.time_zone))
        return cls._error(op, "INVALID_DATE", str(exc))
