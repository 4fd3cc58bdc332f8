"""Person, duty, and astronaut-detail records.

Records are frozen pydantic models. Repositories build them from table
rows and persist them back; services produce modified copies with
``model_copy(update=...)`` rather than mutating in place.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class Person(BaseModel):
    """Identity record. ``id`` is ``None`` until the store assigns one."""

    model_config = {"frozen": True}

    id: int | None = None
    name: str


class AstronautDuty(BaseModel):
    """One historical or current assignment.

    A null ``duty_end_date`` marks the person's current duty.
    """

    model_config = {"frozen": True}

    id: int | None = None
    person_id: int
    rank: str
    duty_title: str
    duty_start_date: date
    duty_end_date: date | None = None

    @property
    def is_current(self) -> bool:
        return self.duty_end_date is None


class AstronautDetail(BaseModel):
    """Derived one-per-person career summary."""

    model_config = {"frozen": True}

    id: int | None = None
    person_id: int
    current_rank: str
    current_duty_title: str
    career_start_date: date
    career_end_date: date | None = None


class PersonSummary(BaseModel):
    """Read model: a person plus the optional detail fields."""

    model_config = {"frozen": True}

    person_id: int
    name: str
    current_rank: str | None = None
    current_duty_title: str | None = None
    career_start_date: date | None = None
    career_end_date: date | None = None
