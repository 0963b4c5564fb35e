"""Root CLI group for habitctl with global flags and command registration."""

from __future__ import annotations

import click

from habitctl import __version__
from habitctl.commands import register_commands
from habitctl.commands._context import AppContext
from habitctl.config.settings import HabitSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="habitctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--data", "data_path", default=None, help="Override habit data file path.")
@click.option("--tz", "time_zone", default=None, help="IANA time zone, e.g. Europe/Berlin.")
@click.option(
    "--grace",
    "grace_minutes",
    default=None,
    type=click.IntRange(min=0),
    help="Minutes after midnight that still count as the previous day.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    data_path: str | None,
    time_zone: str | None,
    grace_minutes: int | None,
) -> None:
    """habitctl — habit schedules, streaks, and heatmaps."""
    ctx.ensure_object(dict)
    settings = HabitSettings.from_cli(
        config_path=config_path,
        data_path=data_path,
        time_zone=time_zone,
        grace_minutes=grace_minutes,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
