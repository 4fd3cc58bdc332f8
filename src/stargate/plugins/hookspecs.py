"""Pluggy hook specifications for stargate record events.

Hooks fire synchronously after the service's transaction commits, so an
implementation always observes committed state.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "stargate"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class StargateHookSpec:
    """Hook specifications for the stargate plugin system."""

    @hookspec
    def post_create_person(self, person_id: int, name: str) -> None:
        """Called after a person is created."""

    @hookspec
    def post_update_person(self, person_id: int, old_name: str, new_name: str) -> None:
        """Called after a person is renamed."""

    @hookspec
    def post_create_duty(
        self,
        person_id: int,
        name: str,
        duty_id: int,
        duty_title: str,
        closed_duty_id: int | None,
        retired: bool,
    ) -> None:
        """Called after a duty is recorded (and any previous duty closed)."""
