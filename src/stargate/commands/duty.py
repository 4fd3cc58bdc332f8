"""Command group: astronaut duty history and new assignments."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from stargate.commands._base import StargateGroup, required_text

if TYPE_CHECKING:
    from stargate.commands._context import AppContext


@click.group(
    cls=StargateGroup,
    examples="""\
  stargate duty list "Jane Doe"
  stargate duty create "Jane Doe" --rank Captain --title Pilot --start 2020-01-10
  stargate duty create "Jane Doe" --rank Captain --title RETIRED --start 2024-03-01""",
)
def duty() -> None:
    """Manage astronaut duties."""


@duty.command(
    "list",
    examples="""\
  stargate duty list "Jane Doe"
  stargate -v duty list "Jane Doe\"""",
)
@click.argument("name")
@click.pass_obj
def list_duties(app: AppContext, name: str) -> None:
    """Show NAME's duty history, most recent first."""
    from stargate.services.duty import AstronautDutyService

    app.emit(AstronautDutyService(app.store).get_duties_by_name(name))


@duty.command(
    examples="""\
  stargate duty create "Jane Doe" --rank Captain --title Pilot --start 2020-01-10
  stargate duty create "Jane Doe" --rank Captain --title RETIRED --start 2024-03-01""",
)
@click.argument("name", callback=required_text("Name"))
@click.option(
    "--rank",
    required=True,
    callback=required_text("Rank"),
    help="Rank held during the duty.",
)
@click.option(
    "--title",
    "duty_title",
    required=True,
    callback=required_text("Title"),
    help="Duty title (RETIRED ends the career).",
)
@click.option(
    "--start",
    "start_date",
    required=True,
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Duty start date (YYYY-MM-DD).",
)
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    rank: str,
    duty_title: str,
    start_date: datetime,
) -> None:
    """Record a new current duty for NAME, closing the previous one."""
    from stargate.services.duty import AstronautDutyService

    app.emit(AstronautDutyService(app.store).create_duty(name, rank, duty_title, start_date))
