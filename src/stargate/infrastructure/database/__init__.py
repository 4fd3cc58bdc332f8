"""SQLite database engine and schema via SQLAlchemy Core."""

from stargate.infrastructure.database.engine import create_db_engine, init_database
from stargate.infrastructure.database.schema import (
    astronaut_detail,
    astronaut_duty,
    metadata,
    person,
)

__all__ = [
    "astronaut_detail",
    "astronaut_duty",
    "create_db_engine",
    "init_database",
    "metadata",
    "person",
]
