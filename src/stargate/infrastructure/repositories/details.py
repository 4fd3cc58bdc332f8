"""Detail rows: one career summary row per person."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from stargate.domain.models import AstronautDetail
from stargate.infrastructure.database.schema import astronaut_detail

if TYPE_CHECKING:
    from sqlalchemy import Connection


class DetailRepository:
    """Encapsulates SQL for the ``astronaut_detail`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def find_by_person_id(self, person_id: int) -> AstronautDetail | None:
        stmt = select(astronaut_detail).where(astronaut_detail.c.person_id == person_id)
        row = self._conn.execute(stmt).mappings().first()
        return AstronautDetail.model_validate(dict(row)) if row is not None else None

    def insert(self, record: AstronautDetail) -> AstronautDetail:
        result = self._conn.execute(
            insert(astronaut_detail).values(**record.model_dump(exclude={"id"}))
        )
        return record.model_copy(update={"id": result.inserted_primary_key[0]})

    def save(self, record: AstronautDetail) -> AstronautDetail:
        self._conn.execute(
            update(astronaut_detail)
            .where(astronaut_detail.c.id == record.id)
            .values(**record.model_dump(exclude={"id", "person_id"}))
        )
        return record
