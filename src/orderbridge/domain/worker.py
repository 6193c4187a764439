"""Long-running reconciliation worker."""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.reconciliation import CycleResult, run_reconciliation_cycle

if TYPE_CHECKING:
    from collections.abc import Callable

    from orderbridge.domain.ports import OrderSource, ReconciliationUnitOfWork

log = getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0


class ReconciliationWorker:
    """Run reconciliation cycles on a fixed interval until asked to stop.

    Cycles never overlap and notifications are handled sequentially. The stop
    event is checked before each cycle and interrupts the sleep between
    cycles; a cycle already in progress finishes its current batch.
    """

    def __init__(
        self,
        *,
        order_source: OrderSource,
        unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
        source_system: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        stop_event: threading.Event | None = None,
    ) -> None:
        if poll_interval < 0:
            raise ValueError("Poll interval must be non-negative")
        self.order_source = order_source
        self.unit_of_work_factory = unit_of_work_factory
        self.source_system = source_system
        self.poll_interval = poll_interval
        self._stop_event = stop_event or threading.Event()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        self._stop_event.set()

    def run_once(self) -> CycleResult | None:
        return run_reconciliation_cycle(
            order_source=self.order_source,
            unit_of_work_factory=self.unit_of_work_factory,
            source_system=self.source_system,
        )

    def run_forever(self) -> int:
        """Loop until stopped; returns the number of cycles attempted."""

        log.info(
            "Reconciliation worker started: source=%s, interval=%ss",
            self.source_system,
            self.poll_interval,
        )
        cycles = 0
        while not self.stopping:
            cycles += 1
            try:
                self.run_once()
            except Exception:
                log.exception("Reconciliation cycle %d failed", cycles)
            if self._stop_event.wait(self.poll_interval):
                break
        log.info("Reconciliation worker stopped after %d cycle(s)", cycles)
        return cycles
