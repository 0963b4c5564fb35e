"""Snapshot file loading.

Habits and completions are persisted elsewhere; the store exports them
as one YAML document that this module reads and validates::

    habits:
      - id: read
        title: Read 20 pages
        schedule:
          - kind: weekly
            weekdays: [1, 2, 3, 4, 5]
    completions:
      - habit: read
        date: 2024-01-02

INVARIANT: Read-only.  Nothing here ever writes the file back.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from habitctl.domain.habits import HabitSnapshot

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """The snapshot file is missing, unreadable, or fails validation."""


def _new_yaml() -> YAML:
    """Create a fresh safe-mode YAML parser (plain dicts, lists, dates)."""
    return YAML(typ="safe", pure=True)


def parse_snapshot(text: str, *, source: str = "<string>") -> HabitSnapshot:
    """Parse and validate a snapshot document.

    An empty document is an empty snapshot.

    Raises:
        SnapshotError: On YAML syntax errors or invalid records.
    """
    try:
        data = _new_yaml().load(text)
    except YAMLError as exc:
        msg = f"Invalid YAML in {source}: {exc}"
        raise SnapshotError(msg) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Invalid habit data in {source}: expected a mapping at the top level"
        raise SnapshotError(msg)

    try:
        snapshot = HabitSnapshot.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid habit data in {source}: {exc}"
        raise SnapshotError(msg) from exc

    logger.debug(
        "Loaded %d habits and %d completions from %s",
        len(snapshot.habits),
        len(snapshot.completions),
        source,
    )
    return snapshot


def load_snapshot(path: Path) -> HabitSnapshot:
    """Read and validate the snapshot file at *path*."""
    if not path.is_file():
        msg = f"Habit data file not found: {path}"
        raise SnapshotError(msg)
    return parse_snapshot(path.read_text(encoding="utf-8"), source=str(path))
