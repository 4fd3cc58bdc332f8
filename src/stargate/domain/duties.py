"""Duty-transition rules.

Pure functions over duty records. The service layer applies them inside
a store transaction:

- A person has at most one open duty (null end date).
- Opening a duty closes the previous one on the day before it starts.
- The ``RETIRED`` title ends the career on the day before it starts.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from stargate.domain.models import AstronautDuty

RETIRED_TITLE = "RETIRED"


def as_date(value: date | datetime) -> date:
    """Drop the time component of *value* (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def day_before(value: date | datetime) -> date:
    """The calendar day before *value*, date-only."""
    return as_date(value) - timedelta(days=1)


def is_retirement(duty_title: str) -> bool:
    """Exact, case-sensitive match against the retirement sentinel."""
    return duty_title == RETIRED_TITLE


def find_current_duty(duties: Iterable[AstronautDuty]) -> AstronautDuty | None:
    """Return the open duty, or None if every duty is closed."""
    for duty in duties:
        if duty.is_current:
            return duty
    return None


def find_duplicate_duty(
    duties: Iterable[AstronautDuty],
    duty_title: str,
    start_date: date | datetime,
) -> AstronautDuty | None:
    """Return an existing duty with the same title and calendar start date."""
    start = as_date(start_date)
    for duty in duties:
        if duty.duty_title == duty_title and duty.duty_start_date == start:
            return duty
    return None


def starts_too_early(current: AstronautDuty, start_date: date | datetime) -> bool:
    """Whether closing *current* before *start_date* leaves an empty interval.

    The closing date is the day before the new start, so the new start
    must fall strictly after the current duty's start.
    """
    return as_date(start_date) <= current.duty_start_date
