"""Webhook intake: notifications are stored as Pending for the worker."""

from __future__ import annotations

from datetime import UTC
from logging import getLogger

from fastapi import APIRouter, HTTPException

from orderbridge.api.deps import UnitOfWorkFactoryDep  # noqa: TC001
from orderbridge.api.schemas import NotificationAccepted, OrderNotificationIn
from orderbridge.domain.ingestion import submit_notification

log = getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/orders", response_model=NotificationAccepted, status_code=202)
def receive_order_notification(
    body: OrderNotificationIn, unit_of_work_factory: UnitOfWorkFactoryDep
) -> NotificationAccepted:
    """Accept an order-change event; reconciliation happens asynchronously.

    When the event carries no ``payload`` the received body itself is kept.
    """

    occurred_at = body.occurred_at
    if occurred_at is not None and occurred_at.tzinfo is None:
        occurred_at = occurred_at.replace(tzinfo=UTC)
    payload = body.payload if body.payload is not None else body.model_dump_json(by_alias=True)

    try:
        notification = submit_notification(
            unit_of_work_factory=unit_of_work_factory,
            source_system=body.source_system,
            external_order_id=body.external_order_id,
            event_id=body.event_id,
            event_type=body.event_type,
            occurred_at=occurred_at,
            payload=payload,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return NotificationAccepted.model_validate(notification)
