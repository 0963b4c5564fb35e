"""Command: today's habits."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from habitctl.commands._base import HabitCommand

if TYPE_CHECKING:
    from habitctl.commands._context import AppContext


@click.command(
    cls=HabitCommand,
    examples="""\
  habitctl dashboard
  habitctl dashboard --today 2024-01-05
  habitctl --json dashboard
  habitctl -q dashboard""",
)
@click.option("--today", "today_key", default=None, help="Evaluate as of this day (YYYY-MM-DD).")
@click.pass_obj
def dashboard(app: AppContext, today_key: str | None) -> None:
    """List habits due today, unfinished first, then the rest."""
    app.emit(app.service().dashboard(today_key))
