"""Read-only views over the run ledger and the order mirror."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from orderbridge.domain.model import Order, ProcessingError, ProcessingRun
    from orderbridge.domain.ports import ReconciliationUnitOfWork

    UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]

DEFAULT_RUN_LIMIT = 20
DEFAULT_ERROR_LIMIT = 20


@dataclass(slots=True)
class RunDetails:
    run: ProcessingRun
    errors: list[ProcessingError]


def list_recent_runs(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    limit: int = DEFAULT_RUN_LIMIT,
) -> list[ProcessingRun]:
    """Most recent runs first."""

    with unit_of_work_factory() as uow:
        return list(uow.repositories.runs.latest(limit=limit))


def get_run_details(
    run_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    error_limit: int = DEFAULT_ERROR_LIMIT,
) -> RunDetails | None:
    with unit_of_work_factory() as uow:
        runs = uow.repositories.runs
        run = runs.get(run_id)
        if run is None:
            return None
        return RunDetails(run=run, errors=list(runs.errors_for(run_id, limit=error_limit)))


def find_order(
    order_number: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> Order | None:
    """Look up a mirrored order (with its lines) by order number."""

    with unit_of_work_factory() as uow:
        return uow.repositories.orders.get_by_order_number(order_number)
