"""Command: scheduled days of a habit in a range."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from habitctl.commands._base import HabitCommand

if TYPE_CHECKING:
    from habitctl.commands._context import AppContext


@click.command(
    cls=HabitCommand,
    examples="""\
  habitctl due read --start 2024-01-01 --end 2024-01-31
  habitctl -q due gym --start 2024-03-01 --end 2024-03-31""",
)
@click.argument("habit_id")
@click.option("--start", required=True, help="First day (YYYY-MM-DD), inclusive.")
@click.option("--end", required=True, help="Last day (YYYY-MM-DD), inclusive.")
@click.pass_obj
def due(app: AppContext, habit_id: str, start: str, end: str) -> None:
    """List every day a habit is due between two dates."""
    app.emit(app.service().scheduled_dates(habit_id, start, end))
