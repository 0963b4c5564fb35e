"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``HABITCTL_*`` prefix
  3. TOML file    — ``habitctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`habitctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from habitctl.config.discovery import find_config
from habitctl.config.models import HistoryConfig, UserConfig

DEFAULT_DATA_FILENAME = "habits.yaml"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``habitctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class HabitSettings(BaseSettings):
    """Unified settings for the habitctl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        config_root: Directory of the discovered ``habitctl.toml``, or CWD
            if none was found.  Relative data paths resolve against it.
        config_path: The TOML file in effect, or None.
        data: Snapshot file path as configured (TOML ``data`` key).
        data_path: Explicit ``--data`` override, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HABITCTL_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (not in TOML, derived from config location) ---
    config_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    data_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML keys and sections ---
    data: str = DEFAULT_DATA_FILENAME
    user: UserConfig = Field(default_factory=UserConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def resolved_data_path(self) -> Path:
        """Absolute-or-config-relative path of the snapshot file."""
        if self.data_path is not None:
            return self.data_path
        path = Path(self.data).expanduser()
        if path.is_absolute():
            return path
        return self.config_root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        config_root: Path | None = None,
        data_path: str | Path | None = None,
        time_zone: str | None = None,
        grace_minutes: int | None = None,
        **cli_flags: Any,
    ) -> HabitSettings:
        """Construct settings from CLI invocation.

        Discovers ``habitctl.toml`` via walk-up (or explicit *config_path*),
        resolves *config_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.  *time_zone*
        and *grace_minutes* override only their keys of the ``[user]``
        section.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(config_root)

        resolved_root = config_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        user_overrides: dict[str, Any] = {}
        if time_zone is not None:
            user_overrides["time_zone"] = time_zone
        if grace_minutes is not None:
            user_overrides["grace_minutes"] = grace_minutes
        if user_overrides:
            cli_flags["user"] = user_overrides

        _tls.toml_path = toml_path
        try:
            return cls(
                config_root=resolved_root,
                config_path=toml_path,
                data_path=Path(data_path) if data_path is not None else None,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
