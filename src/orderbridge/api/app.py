"""FastAPI application factory."""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from fastapi import FastAPI

from orderbridge import __version__
from orderbridge.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
from orderbridge.api.routers import orders, runs, simulated_acme, webhooks
from orderbridge.app import ensure_started

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from orderbridge.api.deps import UnitOfWorkFactory
    from orderbridge.domain.worker import ReconciliationWorker

log = getLogger(__name__)

WORKER_JOIN_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if app.state.unit_of_work_factory is None:
        ensure_started()
        app.state.unit_of_work_factory = SqlAlchemyUnitOfWork

    worker: ReconciliationWorker | None = app.state.worker
    thread: threading.Thread | None = None
    if worker is not None:
        thread = threading.Thread(
            target=worker.run_forever, name="reconciliation-worker", daemon=True
        )
        thread.start()

    try:
        yield
    finally:
        if worker is not None and thread is not None:
            log.info("Stopping reconciliation worker")
            worker.stop()
            thread.join(timeout=WORKER_JOIN_TIMEOUT_SECONDS)


def create_app(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    worker: ReconciliationWorker | None = None,
    simulate_acme: bool = False,
) -> FastAPI:
    """Build the HTTP application.

    Without ``unit_of_work_factory`` the SQLAlchemy adapter is started from
    configuration on startup. A ``worker`` runs in a background thread for the
    lifetime of the app. ``simulate_acme`` also serves the simulated Acme order
    API under ``/external-api``.
    """

    app = FastAPI(title="orderbridge", version=__version__, lifespan=lifespan)
    app.state.unit_of_work_factory = unit_of_work_factory
    app.state.worker = worker

    app.include_router(webhooks.router)
    app.include_router(runs.router)
    app.include_router(orders.router)
    if simulate_acme:
        app.include_router(simulated_acme.router)
    return app
