"""Tests for AstronautDutyService — duty history and the transition rule."""

import sqlite3
import threading
from datetime import date, datetime, timedelta
from typing import Any

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from stargate.infrastructure.database.schema import astronaut_detail, astronaut_duty, person
from stargate.infrastructure.repositories import DutyRepository
from stargate.infrastructure.store import Store
from stargate.plugins import hookimpl
from stargate.services.duty import AstronautDutyService
from stargate.services.result import ErrorCode, ServiceResult
from tests.conftest import create_duty, create_person


def _snapshot(store: Store) -> dict[str, list[Any]]:
    """Every row of every table, for before/after comparisons."""
    with store.engine.connect() as conn:
        return {
            table.name: [tuple(row) for row in conn.execute(select(table).order_by(table.c.id))]
            for table in (person, astronaut_duty, astronaut_detail)
        }


def _open_duties(store: Store, person_id: int) -> list[Any]:
    with store.engine.connect() as conn:
        stmt = select(astronaut_duty).where(
            astronaut_duty.c.person_id == person_id,
            astronaut_duty.c.duty_end_date.is_(None),
        )
        return list(conn.execute(stmt))


@pytest.fixture
def jane(store: Store) -> int:
    return create_person(store, "Jane")["person_id"]


class _DutyRecorder:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    @hookimpl
    def post_create_duty(
        self,
        person_id: int,
        name: str,
        duty_id: int,
        duty_title: str,
        closed_duty_id: int | None,
        retired: bool,
    ) -> None:
        self.calls.append(
            {
                "duty_id": duty_id,
                "duty_title": duty_title,
                "closed_duty_id": closed_duty_id,
                "retired": retired,
            }
        )


# ---------------------------------------------------------------------------
# get_duties_by_name
# ---------------------------------------------------------------------------


class TestGetDutiesByName:
    def test_unknown_name_is_empty_success(self, store: Store) -> None:
        result = AstronautDutyService(store).get_duties_by_name("Nobody")
        assert result.ok
        assert result.op == "list_duties"
        assert result.data["person"] is None
        assert result.data["items"] == []
        assert result.data["count"] == 0

    def test_person_without_duties(self, store: Store, jane: int) -> None:
        result = AstronautDutyService(store).get_duties_by_name("Jane")
        assert result.ok
        assert result.data["person"]["person_id"] == jane
        assert result.data["items"] == []

    def test_newest_first(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        create_duty(store, "Jane", "Captain", "Commander", date(2021, 6, 1))
        create_duty(store, "Jane", "Major", "Engineer", date(2022, 3, 1))
        result = AstronautDutyService(store).get_duties_by_name("Jane")
        assert result.data["count"] == 3
        titles = [d["duty_title"] for d in result.data["items"]]
        assert titles == ["Engineer", "Commander", "Pilot"]
        assert result.data["person"]["current_rank"] == "Major"


# ---------------------------------------------------------------------------
# create_duty
# ---------------------------------------------------------------------------


class TestCreateDutyScenario:
    def test_jane_pilot_then_commander(self, store: Store, jane: int) -> None:
        first = create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        assert first["duty"]["duty_end_date"] is None
        assert first["closed_duty"] is None
        assert first["detail"]["career_start_date"] == "2020-01-10"

        second = create_duty(store, "Jane", "Captain", "Commander", date(2021, 6, 1))
        assert second["duty"]["duty_end_date"] is None
        assert second["closed_duty"]["id"] == first["duty"]["id"]
        assert second["closed_duty"]["duty_end_date"] == "2021-05-31"
        assert second["detail"]["current_duty_title"] == "Commander"
        assert second["detail"]["career_start_date"] == "2020-01-10"
        assert second["detail"]["career_end_date"] is None

        items = AstronautDutyService(store).get_duties_by_name("Jane").data["items"]
        by_title = {d["duty_title"]: d for d in items}
        assert by_title["Pilot"]["duty_end_date"] == "2021-05-31"
        assert by_title["Commander"]["duty_end_date"] is None

    def test_returns_new_duty(self, store: Store, jane: int) -> None:
        result = AstronautDutyService(store).create_duty(
            "Jane", "Captain", "Pilot", date(2020, 1, 10)
        )
        assert result.ok
        assert result.op == "create_duty"
        duty = result.data["duty"]
        assert isinstance(duty["id"], int)
        assert duty["person_id"] == jane
        assert duty["rank"] == "Captain"
        assert duty["duty_title"] == "Pilot"
        assert duty["duty_start_date"] == "2020-01-10"


class TestTransitionRule:
    def test_closed_duty_ends_day_before(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 3, 1))
        data = create_duty(store, "Jane", "Captain", "Commander", date(2021, 3, 1))
        closed_end = date.fromisoformat(data["closed_duty"]["duty_end_date"])
        new_start = date.fromisoformat(data["duty"]["duty_start_date"])
        assert closed_end == new_start - timedelta(days=1)
        assert closed_end == date(2021, 2, 28)

    def test_at_most_one_open_duty(self, store: Store, jane: int) -> None:
        start = date(2020, 1, 1)
        for i, title in enumerate(["Pilot", "Commander", "Engineer", "Pilot", "RETIRED"]):
            create_duty(store, "Jane", "Captain", title, start + timedelta(days=90 * i))
            assert len(_open_duties(store, jane)) == 1

    def test_each_duty_closes_once(self, store: Store, jane: int) -> None:
        first = create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        create_duty(store, "Jane", "Captain", "Commander", date(2021, 6, 1))
        third = create_duty(store, "Jane", "Captain", "Engineer", date(2022, 6, 1))
        assert third["closed_duty"]["duty_title"] == "Commander"
        items = AstronautDutyService(store).get_duties_by_name("Jane").data["items"]
        pilot = next(d for d in items if d["id"] == first["duty"]["id"])
        assert pilot["duty_end_date"] == "2021-05-31"

    def test_time_component_is_truncated(self, store: Store, jane: int) -> None:
        data = create_duty(store, "Jane", "Captain", "Pilot", datetime(2020, 1, 10, 15, 30))
        assert data["duty"]["duty_start_date"] == "2020-01-10"
        assert data["detail"]["career_start_date"] == "2020-01-10"

    def test_first_duty_for_each_person_is_independent(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        bob = create_person(store, "Bob")["person_id"]
        data = create_duty(store, "Bob", "Major", "Engineer", date(2019, 5, 5))
        assert data["closed_duty"] is None
        assert len(_open_duties(store, jane)) == 1
        assert len(_open_duties(store, bob)) == 1


class TestCareerDetail:
    def test_first_duty_creates_detail(self, store: Store, jane: int) -> None:
        data = create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        detail = data["detail"]
        assert detail["person_id"] == jane
        assert detail["current_rank"] == "Captain"
        assert detail["current_duty_title"] == "Pilot"
        assert detail["career_start_date"] == "2020-01-10"
        assert detail["career_end_date"] is None

    def test_later_duty_updates_rank_and_title_only(self, store: Store, jane: int) -> None:
        first = create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        second = create_duty(store, "Jane", "Major", "Commander", date(2021, 6, 1))
        assert second["detail"]["id"] == first["detail"]["id"]
        assert second["detail"]["current_rank"] == "Major"
        assert second["detail"]["career_start_date"] == "2020-01-10"

    def test_retired_sets_career_end_on_existing_detail(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        data = create_duty(store, "Jane", "Captain", "RETIRED", date(2023, 1, 1))
        assert data["detail"]["career_end_date"] == "2022-12-31"
        assert data["detail"]["current_duty_title"] == "RETIRED"
        assert data["detail"]["career_start_date"] == "2020-01-10"
        assert data["closed_duty"]["duty_end_date"] == "2022-12-31"

    def test_retired_as_first_duty(self, store: Store, jane: int) -> None:
        data = create_duty(store, "Jane", "Captain", "RETIRED", date(2023, 1, 1))
        assert data["detail"]["career_start_date"] == "2023-01-01"
        assert data["detail"]["career_end_date"] == "2022-12-31"
        assert data["duty"]["duty_end_date"] is None

    @pytest.mark.parametrize("title", ["retired", "Retired", "RETIRED ", "RETIRED-ISH"])
    def test_retirement_is_exact_match(self, store: Store, jane: int, title: str) -> None:
        data = create_duty(store, "Jane", "Captain", title, date(2023, 1, 1))
        assert data["detail"]["career_end_date"] is None

    def test_non_retired_duty_keeps_career_end(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "RETIRED", date(2023, 1, 1))
        data = create_duty(store, "Jane", "Captain", "Consultant", date(2024, 1, 1))
        assert data["detail"]["career_end_date"] == "2022-12-31"
        assert data["detail"]["current_duty_title"] == "Consultant"


class TestCreateDutyFailures:
    def test_unknown_person(self, store: Store) -> None:
        result = AstronautDutyService(store).create_duty(
            "Nobody", "Captain", "Pilot", date(2020, 1, 10)
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.NOT_FOUND
        assert _snapshot(store)["astronaut_duty"] == []

    def test_duplicate_duty_leaves_state_untouched(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        create_duty(store, "Jane", "Captain", "Commander", date(2021, 6, 1))
        before = _snapshot(store)

        result = AstronautDutyService(store).create_duty(
            "Jane", "Major", "Pilot", date(2020, 1, 10)
        )

        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.DUPLICATE_DUTY
        assert result.error.detail["duty_start_date"] == "2020-01-10"
        assert _snapshot(store) == before

    def test_duplicate_of_current_duty(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        before = _snapshot(store)
        result = AstronautDutyService(store).create_duty(
            "Jane", "Captain", "Pilot", datetime(2020, 1, 10, 8, 0)
        )
        assert result.error is not None
        assert result.error.code == ErrorCode.DUPLICATE_DUTY
        assert _snapshot(store) == before

    def test_same_title_different_date_allowed(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        result = AstronautDutyService(store).create_duty(
            "Jane", "Captain", "Pilot", date(2021, 1, 10)
        )
        assert result.ok

    @pytest.mark.parametrize("start", [date(2020, 1, 10), date(2019, 12, 31)])
    def test_start_not_after_current_rejected(
        self, store: Store, jane: int, start: date
    ) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        before = _snapshot(store)

        result = AstronautDutyService(store).create_duty("Jane", "Captain", "Commander", start)

        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.INVALID_START_DATE
        assert result.error.detail["current_start_date"] == "2020-01-10"
        assert _snapshot(store) == before

    def test_day_after_current_start_allowed(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        data = create_duty(store, "Jane", "Captain", "Commander", date(2020, 1, 11))
        assert data["closed_duty"]["duty_end_date"] == "2020-01-10"

    def test_storage_error_rolls_back_close_and_summary(
        self, store: Store, jane: int, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        before = _snapshot(store)

        def _fail(self: DutyRepository, record: Any) -> Any:
            raise OperationalError(
                "INSERT INTO astronaut_duty", {}, sqlite3.OperationalError("disk I/O error")
            )

        monkeypatch.setattr(DutyRepository, "insert", _fail)

        with pytest.raises(OperationalError, match="disk I/O error"):
            AstronautDutyService(store).create_duty("Jane", "Major", "RETIRED", date(2024, 3, 1))

        assert _snapshot(store) == before
        [still_open] = _open_duties(store, jane)
        assert still_open.duty_title == "Pilot"
        with store.engine.connect() as conn:
            detail = conn.execute(select(astronaut_detail)).one()
        assert detail.current_rank == "Captain"
        assert detail.career_end_date is None


class TestCreateDutyHooks:
    def test_hook_receives_closed_duty(self, store: Store, jane: int) -> None:
        recorder = _DutyRecorder()
        assert store.plugins is not None
        store.plugins.register_plugin(recorder)

        first = create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        second = create_duty(store, "Jane", "Captain", "RETIRED", date(2023, 1, 1))

        assert recorder.calls == [
            {
                "duty_id": first["duty"]["id"],
                "duty_title": "Pilot",
                "closed_duty_id": None,
                "retired": False,
            },
            {
                "duty_id": second["duty"]["id"],
                "duty_title": "RETIRED",
                "closed_duty_id": first["duty"]["id"],
                "retired": True,
            },
        ]

    def test_rejected_duty_fires_no_hook(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        recorder = _DutyRecorder()
        assert store.plugins is not None
        store.plugins.register_plugin(recorder)
        AstronautDutyService(store).create_duty("Jane", "Captain", "Pilot", date(2020, 1, 10))
        assert recorder.calls == []

    def test_hook_failure_is_warning(self, store: Store, jane: int) -> None:
        class Broken:
            @hookimpl
            def post_create_duty(self, duty_id: int) -> None:
                raise RuntimeError("plugin exploded")

        assert store.plugins is not None
        store.plugins.register_plugin(Broken())
        result = AstronautDutyService(store).create_duty(
            "Jane", "Captain", "Pilot", date(2020, 1, 10)
        )
        assert result.ok
        assert result.warnings == ["Plugin hook failed: post_create_duty"]
        assert len(_open_duties(store, jane)) == 1


class TestConcurrentCreateDuty:
    def _run_concurrently(
        self, store: Store, calls: list[tuple[str, date]]
    ) -> list[ServiceResult]:
        barrier = threading.Barrier(len(calls))
        results: list[ServiceResult] = []
        lock = threading.Lock()

        def worker(title: str, start: date) -> None:
            svc = AstronautDutyService(store)
            barrier.wait()
            result = svc.create_duty("Jane", "Captain", title, start)
            with lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=call) for call in calls]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)
        return results

    def test_same_duty_recorded_once(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        results = self._run_concurrently(store, [("Commander", date(2021, 6, 1))] * 4)

        assert len(results) == 4
        assert sum(r.ok for r in results) == 1
        assert {r.error.code for r in results if r.error} == {ErrorCode.DUPLICATE_DUTY}
        assert len(_open_duties(store, jane)) == 1

    def test_different_duties_keep_one_open(self, store: Store, jane: int) -> None:
        create_duty(store, "Jane", "Captain", "Pilot", date(2020, 1, 10))
        calls = [
            ("Commander", date(2021, 6, 1)),
            ("Engineer", date(2022, 1, 1)),
            ("Instructor", date(2022, 9, 1)),
        ]
        results = self._run_concurrently(store, calls)

        assert len(results) == 3
        assert any(r.ok for r in results)
        assert len(_open_duties(store, jane)) == 1
        total = AstronautDutyService(store).get_duties_by_name("Jane").data["count"]
        assert total == 1 + sum(r.ok for r in results)
