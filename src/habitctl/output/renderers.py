"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from habitctl.domain.datekey import DAY_NAMES
from habitctl.output.console import create_console, get_output, style_for_level

if TYPE_CHECKING:
    from rich.console import Console

    from habitctl.services.result import ServiceResult

_CELL = "■"
_CELL_WIDTH = 2
_DAY_LABEL_WIDTH = 4


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op in ("today", "date_key"):
        return str(data.get("date_key", ""))
    if result.op == "dashboard":
        return "\n".join(str(item["id"]) for item in data.get("due", []))
    if result.op == "habit_detail":
        return str(data.get("streak", 0))
    if result.op == "scheduled_dates":
        return "\n".join(data.get("dates", []))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="habit.ok")
    op = Text(f"  {result.op}", style="habit.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="habit.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="habit.id")
    elif key == "title":
        v = Text(str(value), style="habit.title")
    elif key in ("date_key", "today", "start", "end"):
        v = Text(str(value), style="habit.date")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _check_mark(done: bool) -> Text:
    if done:
        return Text("✓", style="habit.done")
    return Text("·", style="habit.pending")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="habit.error")
    op = Text(f"  {result.op}", style="habit.op")
    console.print(Text.assemble(label, op, " — ", msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Day renderers ─────────────────────────────────────────────────────


def _render_date_key(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render today/date_key results."""
    _status_line(console, result)
    d = result.data
    _field(console, "date_key", d.get("date_key", ""))
    _field(console, "display", d.get("display", ""))
    if verbose:
        for key in ("time_zone", "grace_minutes", "instant_ms"):
            if key in d:
                _field(console, key, d[key])


# ── Habit renderers ───────────────────────────────────────────────────


def _habit_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for dashboard habit summaries."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="habit.id", no_wrap=True)
    table.add_column("Title", style="habit.title")
    table.add_column("Schedule")
    if verbose:
        table.add_column("Color", style="dim")

    for item in items:
        row: list[Any] = [
            _check_mark(bool(item.get("is_completed_today"))),
            str(item.get("id", "")),
            str(item.get("title", "")),
            str(item.get("schedule", "")),
        ]
        if verbose:
            row.append(str(item.get("color", "")))
        table.add_row(*row)
    return table


def _render_dashboard(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render today's habits, then the others."""
    d = result.data
    due = d.get("due", [])
    other = d.get("other", [])

    header = Text("Today's habits", style="habit.title")
    header.append(f"  {d.get('today', '')}", style="habit.date")
    if due:
        header.append(f"  {d.get('completed_count', 0)}/{d.get('due_count', len(due))} done")
    console.print(header)

    if due:
        console.print(_habit_table(due, verbose=verbose))
    else:
        console.print("  No habits scheduled for today")

    if other:
        console.print()
        console.print(Text("Other habits", style="habit.key"))
        console.print(_habit_table(other, verbose=verbose))


def _render_habit_detail(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render one habit as a panel with its streak."""
    d = result.data
    lines: list[str] = [
        f"schedule: {d.get('schedule', '')}",
        f"streak: [habit.streak]{d.get('streak', 0)}[/habit.streak]",
    ]
    if d.get("is_due_today"):
        state = "done" if d.get("is_completed_today") else "not done yet"
        lines.append(f"today: due, {state}")
    else:
        lines.append("today: not due")
    lines.append(f"completions since {d.get('history_start', '?')}: {len(d.get('completed_dates', []))}")
    if d.get("archived"):
        lines.append("archived: yes")
    if verbose:
        lines.append(f"scheduled days in window: {d.get('scheduled_count', 0)}")
        lines.append(f"color: {d.get('color', '')}")

    content = "\n".join(lines)
    notes = d.get("notes")
    if notes:
        content += f"\n\n{str(notes).strip()}"

    title = f"{d.get('id', '?')} — {d.get('title', 'Untitled')}"
    console.print(Panel(content, title=title, border_style="dim", expand=False))


def _render_scheduled_dates(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render due dates in a range."""
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id", ""))
    _field(console, "schedule", d.get("schedule", ""))
    _field(console, "start", d.get("start", ""))
    _field(console, "end", d.get("end", ""))
    dates = d.get("dates", [])
    if dates:
        console.print()
        for key in dates:
            console.print(Text(f"  {key}", style="habit.date"))
    console.print(f"\n{d.get('count', len(dates))} scheduled days")


# ── Heatmap renderer ──────────────────────────────────────────────────


def _month_header(labels: list[dict[str, Any]], columns: int) -> Text:
    """Month abbreviations positioned over their first column."""
    width = _DAY_LABEL_WIDTH + columns * _CELL_WIDTH
    chars = [" "] * width
    next_free = 0
    for label in labels:
        pos = _DAY_LABEL_WIDTH + int(label["column"]) * _CELL_WIDTH
        name = str(label["month"])
        if pos < next_free or pos + len(name) > width:
            continue
        chars[pos : pos + len(name)] = name
        next_free = pos + len(name) + 1
    return Text("".join(chars).rstrip(), style="habit.key")


def _render_heatmap(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the contribution grid, one text row per weekday."""
    d = result.data
    title = d.get("title") or "All habits"
    header = Text(str(title), style="habit.title")
    header.append(f"  {d.get('start', '')} → {d.get('today', '')}", style="habit.date")
    console.print(header)

    columns = int(d.get("columns", 0))
    console.print(_month_header(d.get("month_labels", []), columns))

    for row_idx, (keys, levels) in enumerate(zip(d.get("rows", []), d.get("levels", []))):
        line = Text(f"{DAY_NAMES[row_idx]:<{_DAY_LABEL_WIDTH}}", style="habit.key")
        for key, level in zip(keys, levels):
            if key is None:
                line.append(" " * _CELL_WIDTH)
            else:
                line.append(_CELL, style=style_for_level(level))
                line.append(" " * (_CELL_WIDTH - 1))
        console.print(line)

    console.print(f"\n{d.get('total', 0)} completions")
    if verbose:
        console.print(f"  max per day: {d.get('max', 0)}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render any result as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "today": _render_date_key,
    "date_key": _render_date_key,
    "dashboard": _render_dashboard,
    "habit_detail": _render_habit_detail,
    "scheduled_dates": _render_scheduled_dates,
    "heatmap": _render_heatmap,
}
