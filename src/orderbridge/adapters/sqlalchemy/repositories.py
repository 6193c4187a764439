"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from orderbridge.adapters.sqlalchemy.mappings import (
    notification_table,
    order_table,
    processing_error_table,
    processing_run_table,
)
from orderbridge.domain.model import (
    Notification,
    NotificationStatus,
    Order,
    ProcessingError,
    ProcessingRun,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyNotificationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Notification) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Notification | None:
        return self.session.get(Notification, entity_id)

    def pending_ids(self, *, source_system: str | None = None) -> list[UUID]:
        stmt = select(notification_table.c.id).where(
            notification_table.c.status == NotificationStatus.PENDING
        )
        if source_system is not None:
            stmt = stmt.where(notification_table.c.source_system == source_system)
        stmt = stmt.order_by(notification_table.c.occurred_at, notification_table.c.id)
        return list(self.session.scalars(stmt))


class SqlAlchemyOrderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Order) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Order | None:
        return self.session.get(Order, entity_id)

    def get_by_external_id(self, source_system: str, external_order_id: str) -> Order | None:
        stmt = (
            select(Order)
            .where(order_table.c.source_system == source_system)
            .where(order_table.c.external_order_id == external_order_id)
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    def get_by_order_number(self, order_number: str) -> Order | None:
        stmt = select(Order).where(order_table.c.order_number == order_number).limit(1)
        return self.session.scalars(stmt).first()


class SqlAlchemyProcessingRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ProcessingRun) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> ProcessingRun | None:
        return self.session.get(ProcessingRun, entity_id)

    def latest(self, *, limit: int) -> Sequence[ProcessingRun]:
        stmt = (
            select(ProcessingRun)
            .order_by(processing_run_table.c.start_time.desc())
            .limit(limit)
        )
        return self.session.scalars(stmt).all()

    def errors_for(self, run_id: UUID, *, limit: int) -> Sequence[ProcessingError]:
        stmt = (
            select(ProcessingError)
            .where(processing_error_table.c.processing_run_id == run_id)
            .order_by(processing_error_table.c.occurred_at)
            .limit(limit)
        )
        return self.session.scalars(stmt).all()


if TYPE_CHECKING:
    from orderbridge.domain.ports.persistence import (
        NotificationRepository,
        OrderRepository,
        ProcessingRunRepository,
    )

    _session_stub = cast("Session", object())
    _notification_repo: NotificationRepository = SqlAlchemyNotificationRepository(_session_stub)
    _order_repo: OrderRepository = SqlAlchemyOrderRepository(_session_stub)
    _run_repo: ProcessingRunRepository = SqlAlchemyProcessingRunRepository(_session_stub)
