"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from stargate.config.models import DatabaseConfig, PluginsConfig


class TestDefaults:
    def test_database_defaults(self) -> None:
        db = DatabaseConfig()
        assert db.path == "stargate.db"
        assert db.timeout == 5.0
        assert db.echo is False

    def test_plugins_enabled_by_default(self) -> None:
        assert PluginsConfig().enabled is True


class TestValidation:
    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DatabaseConfig().timeout = 1.0  # type: ignore[misc]

    def test_sparse_section(self) -> None:
        db = DatabaseConfig.model_validate({"timeout": 0.5})
        assert db.timeout == 0.5
        assert db.path == "stargate.db"

    def test_bad_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DatabaseConfig.model_validate({"timeout": "soon"})
