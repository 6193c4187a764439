from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

import pytest

from orderbridge.domain.model import NotificationStatus
from orderbridge.domain.worker import ReconciliationWorker
from tests.helpers.orders import SOURCE_SYSTEM, make_snapshot, seed_notifications

if TYPE_CHECKING:
    from collections.abc import Callable

    from orderbridge.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from orderbridge.domain.reconciliation import CycleResult
    from tests.helpers.orders import FakeOrderSource


def _unused_factory() -> SqlAlchemyUnitOfWork:
    raise AssertionError("unit of work should not be requested")


class ScriptedWorker(ReconciliationWorker):
    """Worker whose cycles follow a script instead of touching storage."""

    def __init__(self, script: list[Exception | None], **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.script = script
        self.cycles_run = 0

    def run_once(self) -> CycleResult | None:
        self.cycles_run += 1
        step = self.script.pop(0) if self.script else None
        if not self.script:
            self.stop()
        if step is not None:
            raise step
        return None


def test_pre_set_stop_runs_no_cycles(order_source: FakeOrderSource) -> None:
    stop_event = threading.Event()
    stop_event.set()
    worker = ReconciliationWorker(
        order_source=order_source,
        unit_of_work_factory=_unused_factory,
        source_system=SOURCE_SYSTEM,
        stop_event=stop_event,
    )

    assert worker.run_forever() == 0


def test_failing_cycle_does_not_end_the_loop(
    order_source: FakeOrderSource, caplog: pytest.LogCaptureFixture
) -> None:
    worker = ScriptedWorker(
        [RuntimeError("database unavailable"), None],
        order_source=order_source,
        unit_of_work_factory=_unused_factory,
        source_system=SOURCE_SYSTEM,
        poll_interval=0,
    )

    with caplog.at_level("ERROR"):
        cycles = worker.run_forever()

    assert cycles == 2
    assert worker.cycles_run == 2
    assert "Reconciliation cycle 1 failed" in caplog.text


def test_stop_interrupts_sleep(order_source: FakeOrderSource) -> None:
    worker = ScriptedWorker(
        [None, None],
        order_source=order_source,
        unit_of_work_factory=_unused_factory,
        source_system=SOURCE_SYSTEM,
        poll_interval=60,
    )
    thread = threading.Thread(target=worker.run_forever, daemon=True)
    started = time.monotonic()

    thread.start()
    while worker.cycles_run == 0:
        time.sleep(0.01)
    worker.stop()
    thread.join(timeout=2)

    assert not thread.is_alive()
    assert time.monotonic() - started < 5
    assert worker.cycles_run == 1


def test_negative_interval_is_rejected(order_source: FakeOrderSource) -> None:
    with pytest.raises(ValueError, match="non-negative"):
        ReconciliationWorker(
            order_source=order_source,
            unit_of_work_factory=_unused_factory,
            source_system=SOURCE_SYSTEM,
            poll_interval=-1,
        )


def test_run_once_reconciles_pending_notifications(
    order_source: FakeOrderSource,
    unit_of_work_factory: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    order_source.add(make_snapshot("ORD_1"))
    (notification,) = seed_notifications(unit_of_work_factory, "ORD_1")
    worker = ReconciliationWorker(
        order_source=order_source,
        unit_of_work_factory=unit_of_work_factory,
        source_system=SOURCE_SYSTEM,
        poll_interval=0,
    )

    result = worker.run_once()

    assert result is not None
    assert result.processed == 1
    assert worker.run_once() is None
    with unit_of_work_factory() as uow:
        stored = uow.repositories.notifications.get(notification.id)
    assert stored is not None
    assert stored.status is NotificationStatus.PROCESSED
