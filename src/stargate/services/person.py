"""PersonService — person lookup, creation, and renaming.

A person is identified by an exact, case-sensitive name; create and
rename reject names already in use.
"""

from __future__ import annotations

import logging

from stargate.domain.models import Person, PersonSummary
from stargate.services.base import BaseService
from stargate.services.result import ErrorCode, ServiceResult
from stargate.services.telemetry import traced

logger = logging.getLogger(__name__)


class PersonService(BaseService):
    """Handles person reads and name-unique writes."""

    @traced
    def get_by_name(self, name: str) -> ServiceResult:
        """Look up a person. An unknown name is a successful, empty result."""
        with self._store.transaction(write=False) as txn:
            summary = txn.people.find_summary_by_name(name)

        if summary is None:
            logger.info("Person not found: %s", name)
        return ServiceResult(
            ok=True,
            op="get_person",
            data={"person": summary.model_dump(mode="json") if summary else None},
        )

    @traced
    def get_all(self) -> ServiceResult:
        with self._store.transaction(write=False) as txn:
            summaries = txn.people.find_summaries()

        logger.info("Retrieved %d people", len(summaries))
        return ServiceResult(
            ok=True,
            op="list_people",
            data={
                "count": len(summaries),
                "items": [s.model_dump(mode="json") for s in summaries],
            },
        )

    @traced
    def create(self, name: str) -> ServiceResult:
        op = "create_person"
        warnings: list[str] = []

        with self._store.transaction() as txn:
            if txn.people.find_by_name(name) is not None:
                logger.warning("Duplicate person name rejected: %s", name)
                return ServiceResult.failure(
                    op,
                    ErrorCode.DUPLICATE_NAME,
                    f"A person with the name '{name}' already exists.",
                    name=name,
                )
            person = txn.people.insert(Person(name=name))

        assert person.id is not None
        logger.info("Created person %s (id=%d)", name, person.id)
        self._dispatch_event(
            "post_create_person",
            {"person_id": person.id, "name": person.name},
            warnings,
        )
        summary = PersonSummary(person_id=person.id, name=person.name)
        return ServiceResult(
            ok=True,
            op=op,
            data={"person": summary.model_dump(mode="json")},
            warnings=warnings,
        )

    @traced
    def update(self, current_name: str, new_name: str) -> ServiceResult:
        """Rename a person in place; the id never changes.

        Renaming to the same name is applied without a duplicate check.
        """
        op = "update_person"
        warnings: list[str] = []

        with self._store.transaction() as txn:
            person = txn.people.find_by_name(current_name)
            if person is None:
                logger.warning("Person not found for update: %s", current_name)
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"Person with name '{current_name}' not found.",
                    name=current_name,
                )

            if new_name != current_name and txn.people.find_by_name(new_name) is not None:
                logger.warning("Rename rejected, name in use: %s -> %s", current_name, new_name)
                return ServiceResult.failure(
                    op,
                    ErrorCode.DUPLICATE_NAME,
                    f"A person with the name '{new_name}' already exists.",
                    name=new_name,
                )

            person = txn.people.save(person.model_copy(update={"name": new_name}))
            summary = txn.people.find_summary_by_name(new_name)

        assert person.id is not None and summary is not None
        logger.info("Renamed person %d: %s -> %s", person.id, current_name, new_name)
        self._dispatch_event(
            "post_update_person",
            {"person_id": person.id, "old_name": current_name, "new_name": new_name},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"person": summary.model_dump(mode="json"), "previous_name": current_name},
            warnings=warnings,
        )
