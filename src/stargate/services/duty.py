"""AstronautDutyService — duty history and the duty-transition rule.

Pipeline for ``create_duty``: RESOLVE → VALIDATE → CLOSE → SUMMARIZE → RECORD → EVENT

Everything up to RECORD runs in one store transaction that holds the
SQLite write lock from its first read, so two calls for the same person
cannot both observe the same current duty. Every rejection happens in
VALIDATE, before the first write.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

from stargate.domain.duties import (
    as_date,
    day_before,
    find_current_duty,
    find_duplicate_duty,
    is_retirement,
    starts_too_early,
)
from stargate.domain.models import AstronautDetail, AstronautDuty
from stargate.services.base import BaseService
from stargate.services.result import ErrorCode, ServiceResult
from stargate.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from stargate.infrastructure.store import StoreTransaction

logger = logging.getLogger(__name__)


class AstronautDutyService(BaseService):
    """Handles duty history reads and duty creation."""

    @traced
    def get_duties_by_name(self, name: str) -> ServiceResult:
        """Return the person and their duties, newest first.

        An unknown name yields ``person=None`` and no duties, never an error.
        """
        with self._store.transaction(write=False) as txn:
            summary = txn.people.find_summary_by_name(name)
            duties = (
                txn.duties.find_all_by_person_id(summary.person_id)
                if summary is not None
                else []
            )

        if summary is None:
            logger.info("No person for duty lookup: %s", name)
        else:
            logger.info("Retrieved %d duties for %s", len(duties), name)
        return ServiceResult(
            ok=True,
            op="list_duties",
            data={
                "person": summary.model_dump(mode="json") if summary else None,
                "count": len(duties),
                "items": [d.model_dump(mode="json") for d in duties],
            },
        )

    @traced
    def create_duty(
        self,
        name: str,
        rank: str,
        duty_title: str,
        start_date: date | datetime,
    ) -> ServiceResult:
        """Record a new current duty for *name*.

        Closes the previous current duty on the day before *start_date*,
        creates or updates the career detail, and inserts the new duty
        with no end date.
        """
        op = "create_duty"
        warnings: list[str] = []
        start = as_date(start_date)
        retired = is_retirement(duty_title)

        with self._store.transaction() as txn:
            # ── RESOLVE ──────────────────────────────────────────
            person = txn.people.find_by_name(name)
            if person is None:
                logger.warning("Cannot create duty, person not found: %s", name)
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"Person with name '{name}' not found.",
                    name=name,
                )
            assert person.id is not None
            history = txn.duties.find_all_by_person_id(person.id)

            # ── VALIDATE ─────────────────────────────────────────
            if find_duplicate_duty(history, duty_title, start) is not None:
                logger.warning(
                    "Duplicate duty rejected: %s / %s / %s", name, duty_title, start.isoformat()
                )
                return ServiceResult.failure(
                    op,
                    ErrorCode.DUPLICATE_DUTY,
                    f"An astronaut duty with title '{duty_title}' and start date "
                    f"'{start.isoformat()}' already exists for this person.",
                    name=name,
                    duty_title=duty_title,
                    duty_start_date=start.isoformat(),
                )

            current = find_current_duty(history)
            if current is not None and starts_too_early(current, start):
                return ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_START_DATE,
                    f"Start date {start.isoformat()} must be after the current duty's "
                    f"start date {current.duty_start_date.isoformat()}.",
                    name=name,
                    current_duty_id=current.id,
                    current_start_date=current.duty_start_date.isoformat(),
                )

            # ── CLOSE ────────────────────────────────────────────
            closed: AstronautDuty | None = None
            if current is not None:
                with trace_span("close_current_duty"):
                    closed = txn.duties.save(
                        current.model_copy(update={"duty_end_date": day_before(start)})
                    )
                logger.info(
                    "Closed duty %s for %s on %s", closed.id, name, closed.duty_end_date
                )

            # ── SUMMARIZE ────────────────────────────────────────
            with trace_span("upsert_detail"):
                detail = self._upsert_detail(txn, person.id, rank, duty_title, start, retired)

            # ── RECORD ───────────────────────────────────────────
            duty = txn.duties.insert(
                AstronautDuty(
                    person_id=person.id,
                    rank=rank,
                    duty_title=duty_title,
                    duty_start_date=start,
                )
            )

        assert duty.id is not None
        logger.info("Created duty %d for %s: %s", duty.id, name, duty_title)

        # ── EVENT ────────────────────────────────────────────
        self._dispatch_event(
            "post_create_duty",
            {
                "person_id": person.id,
                "name": name,
                "duty_id": duty.id,
                "duty_title": duty_title,
                "closed_duty_id": closed.id if closed else None,
                "retired": retired,
            },
            warnings,
        )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "duty": duty.model_dump(mode="json"),
                "closed_duty": closed.model_dump(mode="json") if closed else None,
                "detail": detail.model_dump(mode="json"),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _upsert_detail(
        txn: StoreTransaction,
        person_id: int,
        rank: str,
        duty_title: str,
        start: date,
        retired: bool,
    ) -> AstronautDetail:
        """Create the career detail on the first duty, otherwise update it in place.

        The career start date is fixed by the first duty. Only a
        retirement title sets the career end date.
        """
        detail = txn.details.find_by_person_id(person_id)
        if detail is None:
            created = txn.details.insert(
                AstronautDetail(
                    person_id=person_id,
                    current_rank=rank,
                    current_duty_title=duty_title,
                    career_start_date=start,
                    career_end_date=day_before(start) if retired else None,
                )
            )
            logger.info("Created astronaut detail for person %d", person_id)
            return created

        changes: dict[str, object] = {"current_rank": rank, "current_duty_title": duty_title}
        if retired:
            changes["career_end_date"] = day_before(start)
        logger.info("Updated astronaut detail for person %d", person_id)
        return txn.details.save(detail.model_copy(update=changes))
