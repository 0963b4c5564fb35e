"""Tests for habitctl.toml discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from habitctl.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME, find_config


class TestFindConfig:
    def test_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        assert find_config(tmp_path) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        custom = tmp_path / "custom.toml"
        custom.write_text("", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
        assert find_config(tmp_path) == custom

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None
