"""Reconcile pending notifications against the authoritative order source.

A cycle snapshots the pending notifications, opens a ``ProcessingRun`` and
handles every notification in its own unit of work, so one bad item can
neither roll back nor block the others. Failures are converted into persisted
state: the notification becomes Failed, the run gains a ``ProcessingError``
and its failure counter moves.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.comparison import snapshot_matches_order
from orderbridge.domain.model import ItemOutcome, Order, ProcessingRun
from orderbridge.domain.validation import validate_snapshot

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from orderbridge.domain.model import OrderSnapshot
    from orderbridge.domain.ports import (
        OrderRepository,
        OrderSource,
        ProcessingRunRepository,
        ReconciliationUnitOfWork,
    )

    UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]

log = getLogger(__name__)


class RunNotFoundError(LookupError):
    """Raised when the run being recorded into is missing from the ledger."""


@dataclass(slots=True)
class CycleResult:
    """Outcome of one reconciliation cycle."""

    run_id: UUID
    batch_size: int
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    missing: int = 0

    def record(self, outcome: ItemOutcome | None) -> None:
        match outcome:
            case ItemOutcome.PROCESSED:
                self.processed += 1
            case ItemOutcome.SKIPPED:
                self.skipped += 1
            case ItemOutcome.FAILED:
                self.failed += 1
            case None:
                self.missing += 1


def upsert_order(
    orders: OrderRepository,
    *,
    source_system: str,
    snapshot: OrderSnapshot,
) -> ItemOutcome:
    """Insert, update or leave alone the mirrored order for ``snapshot``."""

    existing = orders.get_by_external_id(source_system, snapshot.external_order_id)
    if existing is None:
        orders.add(Order.from_snapshot(source_system, snapshot))
        return ItemOutcome.PROCESSED

    if snapshot_matches_order(existing, snapshot):
        return ItemOutcome.SKIPPED

    existing.apply_snapshot(snapshot)
    return ItemOutcome.PROCESSED


def process_notification(
    notification_id: UUID,
    *,
    run_id: UUID,
    source_system: str,
    order_source: OrderSource,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ItemOutcome | None:
    """Reconcile a single notification inside its own unit of work.

    Returns ``None`` when the notification vanished (or was already handled)
    between discovery and processing; nothing is recorded in that case.
    """

    try:
        with unit_of_work_factory() as uow:
            repositories = uow.repositories
            notification = repositories.notifications.get(notification_id)
            if notification is None or not notification.is_pending:
                log.debug("Notification %s no longer pending; skipping", notification_id)
                return None

            snapshot = order_source.fetch_order(notification.external_order_id)
            validate_snapshot(snapshot)
            outcome = upsert_order(
                repositories.orders,
                source_system=source_system,
                snapshot=snapshot,
            )
            notification.mark_processed()
            _require_run(repositories.runs, run_id).record(outcome)
            uow.commit()
            return outcome
    except Exception as exc:  # noqa: BLE001
        message = _describe(exc)

    try:
        _record_failure(
            notification_id,
            run_id=run_id,
            source_system=source_system,
            message=message,
            unit_of_work_factory=unit_of_work_factory,
        )
    except Exception:
        # The notification stays Pending and is picked up again next cycle.
        log.exception("Could not record failure of notification %s", notification_id)
    return ItemOutcome.FAILED


def run_reconciliation_cycle(
    *,
    order_source: OrderSource,
    unit_of_work_factory: UnitOfWorkFactory,
    source_system: str,
) -> CycleResult | None:
    """Run one discover/open/process/close cycle; ``None`` when nothing was pending."""

    with unit_of_work_factory() as uow:
        batch = uow.repositories.notifications.pending_ids(source_system=source_system)

    if not batch:
        log.debug("No pending %s notifications", source_system)
        return None

    with unit_of_work_factory() as uow:
        run = ProcessingRun()
        uow.repositories.runs.add(run)
        uow.commit()
        run_id = run.id

    log.info("Run %s started with %d pending notification(s)", run_id, len(batch))
    result = CycleResult(run_id=run_id, batch_size=len(batch))

    try:
        for notification_id in batch:
            outcome = process_notification(
                notification_id,
                run_id=run_id,
                source_system=source_system,
                order_source=order_source,
                unit_of_work_factory=unit_of_work_factory,
            )
            result.record(outcome)
    finally:
        with unit_of_work_factory() as uow:
            _require_run(uow.repositories.runs, run_id).complete()
            uow.commit()

    log.info(
        "Run %s completed: processed=%d, skipped=%d, failed=%d, missing=%d",
        run_id,
        result.processed,
        result.skipped,
        result.failed,
        result.missing,
    )
    return result


def _record_failure(
    notification_id: UUID,
    *,
    run_id: UUID,
    source_system: str,
    message: str,
    unit_of_work_factory: UnitOfWorkFactory,
) -> None:
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        notification = repositories.notifications.get(notification_id)
        external_order_id = ""
        if notification is not None:
            external_order_id = notification.external_order_id
            if notification.is_pending:
                notification.mark_failed(message)

        log.warning(
            "Reconciliation of %s order %s failed: %s",
            source_system,
            external_order_id or notification_id,
            message,
        )
        _require_run(repositories.runs, run_id).record_failure(
            source_system=source_system,
            external_order_id=external_order_id,
            message=message,
        )
        uow.commit()


def _require_run(runs: ProcessingRunRepository, run_id: UUID) -> ProcessingRun:
    run = runs.get(run_id)
    if run is None:
        raise RunNotFoundError(f"Processing run {run_id} not found")
    return run


def _describe(exc: BaseException) -> str:
    message = str(exc) or type(exc).__name__
    # Lone surrogates cannot be stored as UTF-8 text.
    return message.encode("utf-8", "backslashreplace").decode("utf-8")
