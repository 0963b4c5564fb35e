"""Command: contribution heatmap."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from habitctl.commands._base import HabitCommand

if TYPE_CHECKING:
    from habitctl.commands._context import AppContext


@click.command(
    cls=HabitCommand,
    examples="""\
  habitctl heatmap
  habitctl heatmap --habit read --weeks 16
  habitctl heatmap --today 2024-06-30 --weeks 8""",
)
@click.option("--habit", "habit_id", default=None, help="Only this habit (default: all).")
@click.option("--weeks", default=None, type=click.IntRange(min=1), help="Weeks to show.")
@click.option("--today", "today_key", default=None, help="End on this day (YYYY-MM-DD).")
@click.pass_obj
def heatmap(
    app: AppContext,
    habit_id: str | None,
    weeks: int | None,
    today_key: str | None,
) -> None:
    """Draw a weekday-by-week grid of completions."""
    app.emit(app.service().heatmap(habit_id, today=today_key, weeks=weeks))
