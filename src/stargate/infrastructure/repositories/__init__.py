"""Connection-bound repositories for people, duties, and career details."""

from stargate.infrastructure.repositories.details import DetailRepository
from stargate.infrastructure.repositories.duties import DutyRepository
from stargate.infrastructure.repositories.people import PersonRepository

__all__ = ["DetailRepository", "DutyRepository", "PersonRepository"]
