"""Command: today's date key."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from habitctl.commands._base import HabitCommand

if TYPE_CHECKING:
    from habitctl.commands._context import AppContext


@click.command(
    cls=HabitCommand,
    examples="""\
  habitctl today
  habitctl --tz America/New_York --grace 180 today
  habitctl -q today""",
)
@click.pass_obj
def today(app: AppContext) -> None:
    """Show today's date key in your time zone, after the grace period."""
    app.emit(app.service(with_data=False).today())
