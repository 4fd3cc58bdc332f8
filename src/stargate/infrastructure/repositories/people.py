"""Person rows: lookups by exact name, inserts, and renames."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from stargate.domain.models import Person, PersonSummary
from stargate.infrastructure.database.schema import astronaut_detail, person

if TYPE_CHECKING:
    from sqlalchemy import Connection, Select


class PersonRepository:
    """Encapsulates SQL for the ``person`` table.

    Bound to a single connection; the caller owns the transaction.
    """

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def find_by_name(self, name: str) -> Person | None:
        """Exact, case-sensitive name lookup."""
        row = self._conn.execute(select(person).where(person.c.name == name)).mappings().first()
        return Person.model_validate(dict(row)) if row is not None else None

    def find_all(self) -> list[Person]:
        rows = self._conn.execute(select(person).order_by(person.c.id)).mappings().all()
        return [Person.model_validate(dict(row)) for row in rows]

    def insert(self, record: Person) -> Person:
        """Insert *record* and return it with the assigned id."""
        result = self._conn.execute(insert(person).values(name=record.name))
        return record.model_copy(update={"id": result.inserted_primary_key[0]})

    def save(self, record: Person) -> Person:
        self._conn.execute(update(person).where(person.c.id == record.id).values(name=record.name))
        return record

    # ------------------------------------------------------------------
    # Read models joined with the career detail
    # ------------------------------------------------------------------

    def find_summary_by_name(self, name: str) -> PersonSummary | None:
        row = self._conn.execute(self._summary_query().where(person.c.name == name))
        mapping = row.mappings().first()
        return PersonSummary.model_validate(dict(mapping)) if mapping is not None else None

    def find_summaries(self) -> list[PersonSummary]:
        stmt = self._summary_query().order_by(person.c.id)
        rows = self._conn.execute(stmt).mappings().all()
        return [PersonSummary.model_validate(dict(row)) for row in rows]

    @staticmethod
    def _summary_query() -> Select:
        return select(
            person.c.id.label("person_id"),
            person.c.name,
            astronaut_detail.c.current_rank,
            astronaut_detail.c.current_duty_title,
            astronaut_detail.c.career_start_date,
            astronaut_detail.c.career_end_date,
        ).select_from(
            person.outerjoin(astronaut_detail, astronaut_detail.c.person_id == person.c.id)
        )
