"""Rich Console factory and theme for habitctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

HABIT_THEME = Theme(
    {
        "habit.ok": "bold green",
        "habit.error": "bold red",
        "habit.op": "bold cyan",
        "habit.key": "dim",
        "habit.id": "bold blue",
        "habit.date": "cyan",
        "habit.title": "bold",
        "habit.done": "green",
        "habit.pending": "yellow",
        "habit.streak": "bold magenta",
        "habit.heat.0": "grey30",
        "habit.heat.1": "green3",
        "habit.heat.2": "green4",
        "habit.heat.3": "dark_green",
        "habit.heat.4": "bold dark_green",
    }
)

HEAT_STYLES: tuple[str, ...] = tuple(f"habit.heat.{level}" for level in range(5))


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=HABIT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_level(level: int | None) -> str:
    """Return the Rich style name for a heatmap intensity level."""
    if level is None:
        return ""
    return HEAT_STYLES[max(0, min(level, len(HEAT_STYLES) - 1))]
