"""Command group: look up, create, and rename people."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stargate.commands._base import StargateGroup, required_text

if TYPE_CHECKING:
    from stargate.commands._context import AppContext


@click.group(
    cls=StargateGroup,
    examples="""\
  stargate person list
  stargate person get "Jane Doe"
  stargate person create "Jane Doe"
  stargate person update "Jane Doe" "Jane Smith\"""",
)
def person() -> None:
    """Manage people."""


@person.command(
    "list",
    examples="""\
  stargate person list
  stargate --json person list""",
)
@click.pass_obj
def list_people(app: AppContext) -> None:
    """List every person with their current career summary."""
    from stargate.services.person import PersonService

    app.emit(PersonService(app.store).get_all())


@person.command(
    examples="""\
  stargate person get "Jane Doe"
  stargate -q person get "Jane Doe\"""",
)
@click.argument("name")
@click.pass_obj
def get(app: AppContext, name: str) -> None:
    """Show one person by exact NAME."""
    from stargate.services.person import PersonService

    app.emit(PersonService(app.store).get_by_name(name))


@person.command(
    examples="""\
  stargate person create "Jane Doe\"""",
)
@click.argument("name", callback=required_text("Name"))
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create a person named NAME (names are unique)."""
    from stargate.services.person import PersonService

    app.emit(PersonService(app.store).create(name))


@person.command(
    examples="""\
  stargate person update "Jane Doe" "Jane Smith\"""",
)
@click.argument("name")
@click.argument("new_name", callback=required_text("Name"))
@click.pass_obj
def update(app: AppContext, name: str, new_name: str) -> None:
    """Rename the person NAME to NEW_NAME."""
    from stargate.services.person import PersonService

    app.emit(PersonService(app.store).update(name, new_name))
