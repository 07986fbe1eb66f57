"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``YUCON_*`` prefix, ``__`` between section and key
  3. TOML file    — ``yucon.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` fed by
the walk-up discovery in :mod:`yucon.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, Literal

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from yucon.config.discovery import find_config
from yucon.config.models import OutputConfig, UnitsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``yucon.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class YuconSettings(BaseSettings):
    """Settings for the whole yucon CLI, frozen once built.

    Attributes:
        config_path: The yucon.toml that was loaded, if any.
        units_path: Explicit ``--units`` override.
        format_override: ``short``/``long`` from ``-s``/``-l``; beats
            ``[output] format``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "YUCON_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    units_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    format_override: Literal["short", "desc", "long"] | None = None

    # --- TOML sections ---
    units: UnitsConfig = Field(default_factory=UnitsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def conversion_format(self) -> str:
        return self.format_override or self.output.format

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> YuconSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* that does not exist is an error; without
        one, yucon.toml is discovered by walking up from *start*.
        """
        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {toml_path}")
        else:
            toml_path = find_config(start)

        # None means "not given on the command line"; let lower layers decide
        flags = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
