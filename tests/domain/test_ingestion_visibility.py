from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from orderbridge.domain.ingestion import submit_notification
from orderbridge.domain.model import NotificationStatus, ProcessingRun, RunStatus, new_id
from orderbridge.domain.reconciliation import run_reconciliation_cycle
from orderbridge.domain.visibility import find_order, get_run_details, list_recent_runs
from tests.helpers.orders import SOURCE_SYSTEM, make_line, make_snapshot, seed_notifications

if TYPE_CHECKING:
    from collections.abc import Callable

    from orderbridge.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from tests.helpers.orders import FakeOrderSource

    UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


def test_submitted_notification_is_pending(unit_of_work_factory: UnitOfWorkFactory) -> None:
    occurred_at = datetime(2026, 2, 18, 9, 30, tzinfo=UTC)

    notification = submit_notification(
        unit_of_work_factory=unit_of_work_factory,
        source_system=SOURCE_SYSTEM,
        external_order_id="ORD_10001",
        event_id="evt-1",
        event_type="order.updated",
        occurred_at=occurred_at,
        payload='{"id": "ORD_10001"}',
    )

    with unit_of_work_factory() as uow:
        stored = uow.repositories.notifications.get(notification.id)
    assert stored is not None
    assert stored.status is NotificationStatus.PENDING
    assert stored.attempts == 0
    assert stored.occurred_at == occurred_at
    assert stored.payload == '{"id": "ORD_10001"}'
    assert (stored.event_id, stored.event_type) == ("evt-1", "order.updated")


def test_submit_defaults_occurred_at_to_now(unit_of_work_factory: UnitOfWorkFactory) -> None:
    before = datetime.now(UTC)

    notification = submit_notification(
        unit_of_work_factory=unit_of_work_factory,
        source_system=SOURCE_SYSTEM,
        external_order_id="ORD_1",
    )

    assert before <= notification.occurred_at <= datetime.now(UTC) + timedelta(seconds=1)


@pytest.mark.parametrize(("source_system", "external_order_id"), [(" ", "ORD_1"), ("Acme", "")])
def test_submit_rejects_blank_identifiers(
    unit_of_work_factory: UnitOfWorkFactory, source_system: str, external_order_id: str
) -> None:
    with pytest.raises(ValueError, match="must not be blank"):
        submit_notification(
            unit_of_work_factory=unit_of_work_factory,
            source_system=source_system,
            external_order_id=external_order_id,
        )

    with unit_of_work_factory() as uow:
        assert uow.repositories.notifications.pending_ids() == []


def _run_cycle(order_source: FakeOrderSource, unit_of_work_factory: UnitOfWorkFactory) -> None:
    run_reconciliation_cycle(
        order_source=order_source,
        unit_of_work_factory=unit_of_work_factory,
        source_system=SOURCE_SYSTEM,
    )


def test_recent_runs_are_newest_first_and_limited(
    unit_of_work_factory: UnitOfWorkFactory,
) -> None:
    base = datetime(2026, 2, 18, 12, 0, tzinfo=UTC)
    with unit_of_work_factory() as uow:
        for offset in range(3):
            uow.repositories.runs.add(ProcessingRun(start_time=base + timedelta(minutes=offset)))
        uow.commit()

    runs = list_recent_runs(unit_of_work_factory=unit_of_work_factory, limit=2)

    assert [run.start_time for run in runs] == [
        base + timedelta(minutes=2),
        base + timedelta(minutes=1),
    ]


def test_run_details_include_errors(
    order_source: FakeOrderSource, unit_of_work_factory: UnitOfWorkFactory
) -> None:
    order_source.fail("FAIL", RuntimeError("Simulated External API Failure"))
    order_source.add(make_snapshot("ORD_INVALID", lines=[make_line(quantity=-1)]))
    seed_notifications(unit_of_work_factory, "FAIL", "ORD_INVALID")
    _run_cycle(order_source, unit_of_work_factory)
    (run,) = list_recent_runs(unit_of_work_factory=unit_of_work_factory)

    details = get_run_details(run.id, unit_of_work_factory=unit_of_work_factory)

    assert details is not None
    assert details.run.status is RunStatus.COMPLETED
    assert details.run.records_failed == 2
    assert [error.external_order_id for error in details.errors] == ["FAIL", "ORD_INVALID"]
    assert "Invalid quantity -1" in details.errors[1].error_message

    limited = get_run_details(run.id, unit_of_work_factory=unit_of_work_factory, error_limit=1)
    assert limited is not None
    assert len(limited.errors) == 1


def test_run_details_for_unknown_run(unit_of_work_factory: UnitOfWorkFactory) -> None:
    assert get_run_details(new_id(), unit_of_work_factory=unit_of_work_factory) is None


def test_find_order_by_number_includes_lines(
    order_source: FakeOrderSource, unit_of_work_factory: UnitOfWorkFactory
) -> None:
    order_source.add(
        make_snapshot("ORD_10001", lines=[make_line("PROD-001"), make_line("PROD-002")])
    )
    seed_notifications(unit_of_work_factory, "ORD_10001")
    _run_cycle(order_source, unit_of_work_factory)

    order = find_order("SO-10001", unit_of_work_factory=unit_of_work_factory)

    assert order is not None
    assert order.external_order_id == "ORD_10001"
    assert [line.sku for line in order.lines] == ["PROD-001", "PROD-002"]
    assert find_order("SO-00000", unit_of_work_factory=unit_of_work_factory) is None
