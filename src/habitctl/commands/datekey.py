"""Command: project an instant onto a calendar day."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from habitctl.commands._base import HabitCommand

if TYPE_CHECKING:
    from habitctl.commands._context import AppContext


@click.command(
    cls=HabitCommand,
    examples="""\
  habitctl datekey --at 2024-03-01T02:00:00
  habitctl datekey --at 2024-03-01T07:00:00+00:00 --tz America/New_York
  habitctl --grace 0 datekey --ms 1709276400000""",
)
@click.option("--at", "at", default=None, help="ISO 8601 timestamp (naive = local time).")
@click.option("--ms", "instant_ms", default=None, type=int, help="Unix time in milliseconds.")
@click.pass_obj
def datekey(app: AppContext, at: str | None, instant_ms: int | None) -> None:
    """Show which day an instant belongs to, honouring the grace period."""
    if at is not None and instant_ms is not None:
        raise click.UsageError("Use either --at or --ms, not both.")
    app.emit(app.service(with_data=False).date_key(instant_ms, at=at))
