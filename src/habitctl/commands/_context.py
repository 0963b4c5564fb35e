"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy snapshot loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from habitctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from habitctl.config.settings import HabitSettings
    from habitctl.domain.habits import HabitSnapshot
    from habitctl.services.habits import HabitService
    from habitctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The snapshot file is read lazily on first use so ``--help``,
    ``--version``, and the clock-only commands never touch it.
    """

    def __init__(self, settings: HabitSettings) -> None:
        self.settings = settings
        self._snapshot: HabitSnapshot | None = None

        from habitctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def snapshot(self) -> HabitSnapshot:
        """The habit snapshot (loaded lazily on first access).

        Raises:
            click.ClickException: If the data file is missing or invalid.
        """
        if self._snapshot is None:
            from habitctl.infrastructure.snapshot import SnapshotError, load_snapshot

            path = self.settings.resolved_data_path
            logger.debug("Loading habit data from %s", path)
            try:
                self._snapshot = load_snapshot(path)
            except SnapshotError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._snapshot

    def service(self, *, with_data: bool = True) -> HabitService:
        """A HabitService over the snapshot, or over no habits at all."""
        from habitctl.domain.habits import HabitSnapshot
        from habitctl.services.habits import HabitService

        snapshot = self.snapshot if with_data else HabitSnapshot()
        return HabitService(snapshot, self.settings)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
