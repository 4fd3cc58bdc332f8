"""Duty rows: a person's duty history."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from stargate.domain.models import AstronautDuty
from stargate.infrastructure.database.schema import astronaut_duty

if TYPE_CHECKING:
    from sqlalchemy import Connection


class DutyRepository:
    """Encapsulates SQL for the ``astronaut_duty`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def find_all_by_person_id(self, person_id: int) -> list[AstronautDuty]:
        """All duties for a person, most recent start date first."""
        stmt = (
            select(astronaut_duty)
            .where(astronaut_duty.c.person_id == person_id)
            .order_by(astronaut_duty.c.duty_start_date.desc(), astronaut_duty.c.id.desc())
        )
        rows = self._conn.execute(stmt).mappings().all()
        return [AstronautDuty.model_validate(dict(row)) for row in rows]

    def find_current_by_person_id(self, person_id: int) -> AstronautDuty | None:
        """The person's open duty (null end date), if any."""
        stmt = (
            select(astronaut_duty)
            .where(
                astronaut_duty.c.person_id == person_id,
                astronaut_duty.c.duty_end_date.is_(None),
            )
            .order_by(astronaut_duty.c.duty_start_date.desc())
        )
        row = self._conn.execute(stmt).mappings().first()
        return AstronautDuty.model_validate(dict(row)) if row is not None else None

    def insert(self, record: AstronautDuty) -> AstronautDuty:
        result = self._conn.execute(
            insert(astronaut_duty).values(**record.model_dump(exclude={"id"}))
        )
        return record.model_copy(update={"id": result.inserted_primary_key[0]})

    def save(self, record: AstronautDuty) -> AstronautDuty:
        self._conn.execute(
            update(astronaut_duty)
            .where(astronaut_duty.c.id == record.id)
            .values(**record.model_dump(exclude={"id", "person_id"}))
        )
        return record
