"""Subcommand modules for habitctl.

Provides register_commands() which uses deferred imports to keep
``habitctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from habitctl.commands.dashboard import dashboard
    from habitctl.commands.datekey import datekey
    from habitctl.commands.due import due
    from habitctl.commands.heatmap import heatmap
    from habitctl.commands.show import show
    from habitctl.commands.today import today

    cli.add_command(today)
    cli.add_command(datekey)
    cli.add_command(dashboard)
    cli.add_command(show)
    cli.add_command(due)
    cli.add_command(heatmap)
