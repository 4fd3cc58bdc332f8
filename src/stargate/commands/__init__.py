"""Subcommand modules for stargate.

Provides register_commands() which uses deferred imports to keep
``stargate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``person`` and ``duty`` command groups on the root CLI group."""
    from stargate.commands.duty import duty
    from stargate.commands.person import person

    cli.add_command(person)
    cli.add_command(duty)
