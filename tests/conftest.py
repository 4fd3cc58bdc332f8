"""Shared pytest fixtures and test helpers for stargate tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from stargate.config.settings import StargateSettings
from stargate.infrastructure.database.engine import init_database
from stargate.infrastructure.store import Store
from stargate.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's STARGATE_* environment out of the tests."""
    monkeypatch.delenv("STARGATE_CONFIG", raising=False)
    monkeypatch.delenv("STARGATE_DATA_ROOT", raising=False)
    monkeypatch.delenv("STARGATE_DATABASE__PATH", raising=False)


@pytest.fixture(autouse=True)
def _restore_global_state() -> Iterator[None]:
    """Undo the logging and telemetry setup a CLI invocation leaves behind."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "stargate.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(tmp_path: Path) -> Iterator[Store]:
    """Store on a fresh database under a temp directory, plugins initialized."""
    settings = StargateSettings.from_cli(data_root=tmp_path)
    s = Store(settings)
    s.init_plugins()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_store")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_person(store: Store, name: str) -> dict[str, Any]:
    """Create a person via PersonService, asserting success."""
    from stargate.services.person import PersonService

    result = PersonService(store).create(name)
    assert result.ok, result.error
    return result.data["person"]


def create_duty(
    store: Store,
    name: str,
    rank: str,
    duty_title: str,
    start: date,
) -> dict[str, Any]:
    """Create a duty via AstronautDutyService, asserting success."""
    from stargate.services.duty import AstronautDutyService

    result = AstronautDutyService(store).create_duty(name, rank, duty_title, start)
    assert result.ok, result.error
    return result.data
