"""SQLAlchemy Core table definitions for the stargate database.

Three tables: ``person`` (unique name), ``astronaut_duty`` (duty history,
a null ``duty_end_date`` marks the current duty), and ``astronaut_detail``
(one career summary per person).
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)

metadata = MetaData()

person = Table(
    "person",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
)

astronaut_duty = Table(
    "astronaut_duty",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "person_id",
        Integer,
        ForeignKey("person.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("rank", String(50), nullable=False),
    Column("duty_title", String(100), nullable=False),
    Column("duty_start_date", Date, nullable=False),
    Column("duty_end_date", Date),  # NULL = current duty
)

astronaut_detail = Table(
    "astronaut_detail",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "person_id",
        Integer,
        ForeignKey("person.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("current_rank", String(50), nullable=False),
    Column("current_duty_title", String(100), nullable=False),
    Column("career_start_date", Date, nullable=False),
    Column("career_end_date", Date),
)

Index("ix_astronaut_duty_person", astronaut_duty.c.person_id)
Index(
    "ix_astronaut_duty_person_start",
    astronaut_duty.c.person_id,
    astronaut_duty.c.duty_start_date,
)
