"""``stargate`` entry point: global flags, settings, and the command groups."""

from __future__ import annotations

import click

from stargate import __version__
from stargate.commands import register_commands
from stargate.commands._context import AppContext
from stargate.config.settings import StargateSettings


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="stargate")
@click.option("--json", "json_output", is_flag=True, help="Print the raw result as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this stargate.toml instead of discovering one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """stargate: people and their astronaut duty history."""
    ctx.obj = AppContext(
        StargateSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
