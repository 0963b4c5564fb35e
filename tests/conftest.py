"""Shared pytest fixtures and test helpers for habitctl tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from habitctl.config.settings import HabitSettings
from habitctl.domain.habits import HabitSnapshot
from habitctl.infrastructure.snapshot import parse_snapshot

# 2024-01-01 is a Monday; the fixtures below treat 2024-01-05 (Friday) as today.
SAMPLE_TODAY = "2024-01-05"

SAMPLE_YAML = """\
habits:
  - id: read
    title: Read
    schedule:
      - kind: daily
  - id: gym
    title: Gym
    color: "#3b82f6"
    notes: Leg day on Fridays.
    schedule:
      - kind: weekly
        weekdays: [1, 3, 5]
  - id: rent
    title: Pay rent
    schedule:
      - kind: monthly
        daysOfMonth: [1]
  - id: bday
    title: Birthday call
    schedule:
      - kind: yearly
        month: 3
        day: 5
  - id: empty
    title: Empty
    schedule: []
  - id: old
    title: Old habit
    archivedAt: 1700000000000
    schedule:
      - kind: daily
completions:
  - {habit: read, date: 2024-01-01}
  - {habit: read, date: 2024-01-02}
  - {habit: read, date: 2024-01-03}
  - {habit: read, date: 2024-01-05}
  - {habit: gym, date: 2024-01-01}
  - {habit: gym, date: 2024-01-03}
  - {habit: rent, date: 2024-01-01}
  - {habit: old, date: 2024-01-05}
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own habitctl environment out of tests."""
    monkeypatch.delenv("HABITCTL_CONFIG", raising=False)
    monkeypatch.delenv("HABITCTL_DATA", raising=False)
    monkeypatch.delenv("HABITCTL_USER__TIME_ZONE", raising=False)
    monkeypatch.delenv("HABITCTL_USER__GRACE_MINUTES", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def snapshot() -> HabitSnapshot:
    """The sample habits and completions."""
    return parse_snapshot(SAMPLE_YAML)


@pytest.fixture
def settings(tmp_path: Path) -> HabitSettings:
    """UTC settings with no grace period, rooted at an empty temp dir."""
    return HabitSettings.from_cli(config_root=tmp_path, time_zone="UTC", grace_minutes=0)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Temp directory holding ``habitctl.toml`` and ``habits.yaml``."""
    (tmp_path / "habitctl.toml").write_text(
        '[user]\ntime_zone = "UTC"\ngrace_minutes = 0\n', encoding="utf-8"
    )
    (tmp_path / "habits.yaml").write_text(SAMPLE_YAML, encoding="utf-8")
    return tmp_path


@pytest.fixture
def _isolated_workspace(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the sample workspace so the CLI discovers its config.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace)


@pytest.fixture
def sample_yaml() -> str:
    """Raw text of the sample snapshot document."""
    return SAMPLE_YAML
