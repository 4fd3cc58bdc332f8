"""AppContext: the object every command receives via ``@click.pass_obj``.

It applies logging and telemetry settings as soon as the root group runs,
opens the Store on first use, and turns a ServiceResult into output plus
an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stargate.config.logging import configure_logging
from stargate.output.formatters import OutputSettings, format_result
from stargate.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from stargate.config.settings import StargateSettings
    from stargate.infrastructure.store import Store
    from stargate.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: StargateSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._store: Store | None = None

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            sql_echo=settings.database.echo,
        )
        if settings.verbose:
            enable_telemetry()

    @property
    def store(self) -> Store:
        """Open the database on first access; ``--help`` never reaches here.

        The store is closed when the invoking command's context tears down.
        """
        if self._store is None:
            from stargate.infrastructure.store import Store

            store = Store(self.settings)
            store.init_plugins()
            click.get_current_context().call_on_close(store.close)
            self._store = store
        return self._store

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result goes to stderr and exits with status 1.

        Warnings on a successful result go to stderr unless the output is
        JSON, which already carries them.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
