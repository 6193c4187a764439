"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.adapters.acme import AcmeOrderClient, simulated_client_factory
from orderbridge.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from orderbridge.config import get_acme_config, get_worker_config
from orderbridge.domain.ingestion import submit_notification
from orderbridge.domain.ports.unit_of_work import ReconciliationUnitOfWork
from orderbridge.domain.visibility import find_order, get_run_details, list_recent_runs
from orderbridge.domain.worker import ReconciliationWorker

if TYPE_CHECKING:
    import threading
    from datetime import datetime
    from uuid import UUID

    from orderbridge.domain.model import Notification, Order, ProcessingRun
    from orderbridge.domain.ports import OrderSource
    from orderbridge.domain.reconciliation import CycleResult
    from orderbridge.domain.visibility import RunDetails

UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]


log = getLogger(__name__)


def ensure_started() -> None:
    """Initialise the SQLAlchemy adapter from configuration unless already done."""

    if not is_started():
        startup()


def build_order_source(*, simulate: bool = False) -> AcmeOrderClient:
    """Build the Acme order source; close it (or use it as a context manager) when done."""

    config = get_acme_config(simulate=simulate)
    if simulate:
        log.info("Using the simulated Acme order API")
        return AcmeOrderClient(config=config, client_factory=simulated_client_factory())
    return AcmeOrderClient(config=config)


def build_worker(
    *,
    order_source: OrderSource,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    source_system: str | None = None,
    poll_interval: float | None = None,
    stop_event: threading.Event | None = None,
) -> ReconciliationWorker:
    """Wire a reconciliation worker from configuration and explicit overrides."""

    ensure_started()
    worker_config = get_worker_config()
    return ReconciliationWorker(
        order_source=order_source,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork,
        source_system=source_system or worker_config.source_system,
        poll_interval=(
            worker_config.poll_interval_seconds if poll_interval is None else poll_interval
        ),
        stop_event=stop_event,
    )


def reconcile_once(
    *,
    order_source: OrderSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    source_system: str | None = None,
    simulate: bool = False,
) -> CycleResult | None:
    """Run exactly one reconciliation cycle.

    An order source built here is closed afterwards; a passed-in one is not.
    """

    if order_source is not None:
        return build_worker(
            order_source=order_source,
            unit_of_work_factory=unit_of_work_factory,
            source_system=source_system,
        ).run_once()

    with build_order_source(simulate=simulate) as owned_source:
        return build_worker(
            order_source=owned_source,
            unit_of_work_factory=unit_of_work_factory,
            source_system=source_system,
        ).run_once()


def accept_notification(
    *,
    external_order_id: str,
    source_system: str | None = None,
    event_id: str = "",
    event_type: str = "",
    occurred_at: datetime | None = None,
    payload: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Notification:
    ensure_started()
    return submit_notification(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork,
        source_system=source_system or get_worker_config().source_system,
        external_order_id=external_order_id,
        event_id=event_id,
        event_type=event_type,
        occurred_at=occurred_at,
        payload=payload,
    )


def recent_runs(
    *, limit: int = 20, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> list[ProcessingRun]:
    ensure_started()
    return list_recent_runs(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork, limit=limit
    )


def run_details(
    run_id: UUID, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> RunDetails | None:
    ensure_started()
    return get_run_details(
        run_id, unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork
    )


def order_by_number(
    order_number: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> Order | None:
    ensure_started()
    return find_order(
        order_number, unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork
    )
