"""StargateSettings: one frozen object built from every configuration layer.

Highest priority first:

1. keyword arguments (the CLI flags Click parsed)
2. ``STARGATE_*`` environment variables, nested with ``__``
   (``STARGATE_DATABASE__TIMEOUT=10``)
3. the ``stargate.toml`` in effect (``--config``, ``STARGATE_CONFIG``, or walk-up)
4. the defaults on the section models
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from stargate.config.discovery import find_config
from stargate.config.models import DatabaseConfig, PluginsConfig

# Parsed TOML for the settings object currently being constructed.
_pending_toml: ContextVar[dict[str, Any] | None] = ContextVar("_pending_toml", default=None)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feeds already-parsed ``stargate.toml`` sections to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class StargateSettings(BaseSettings):
    """Settings shared by the CLI, the store and the services.

    Attributes:
        data_root: Directory a relative ``database.path`` is resolved
            against: the config file's directory, else the working directory.
        config_path: The TOML file that was applied, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STARGATE_",
        "env_nested_delimiter": "__",
    }

    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # output and logging flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # stargate.toml sections
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def database_path(self) -> Path:
        path = Path(self.database.path)
        return path if path.is_absolute() else self.data_root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_source = TomlSettingsSource(settings_cls, _pending_toml.get() or {})
        return init_settings, env_settings, toml_source

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> StargateSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* must exist; otherwise the config is
        discovered from *data_root* (or the working directory).
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(data_root)

        if data_root is None:
            data_root = toml_path.parent if toml_path else Path.cwd()

        token = _pending_toml.set(_read_toml(toml_path) if toml_path else {})
        try:
            return cls(data_root=data_root, config_path=toml_path, **cli_flags)
        finally:
            _pending_toml.reset(token)
