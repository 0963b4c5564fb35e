"""Command: one habit with its streak."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from habitctl.commands._base import HabitCommand

if TYPE_CHECKING:
    from habitctl.commands._context import AppContext


@click.command(
    cls=HabitCommand,
    examples="""\
  habitctl show read
  habitctl show read --today 2024-01-05
  habitctl -q show read""",
)
@click.argument("habit_id")
@click.option("--today", "today_key", default=None, help="Evaluate as of this day (YYYY-MM-DD).")
@click.pass_obj
def show(app: AppContext, habit_id: str, today_key: str | None) -> None:
    """Show a habit's schedule, current streak, and recent completions."""
    app.emit(app.service().habit_detail(habit_id, today_key))
