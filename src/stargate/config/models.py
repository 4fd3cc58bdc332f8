"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, stargate.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = "stargate.db"
    timeout: float = 5.0
    echo: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
