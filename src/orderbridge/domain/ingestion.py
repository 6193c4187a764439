"""Accept inbound order-change notifications."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.model import Notification, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from orderbridge.domain.ports import ReconciliationUnitOfWork

log = getLogger(__name__)


def submit_notification(
    *,
    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
    source_system: str,
    external_order_id: str,
    event_id: str = "",
    event_type: str = "",
    occurred_at: datetime | None = None,
    payload: str | None = None,
) -> Notification:
    """Persist a notification as Pending so the worker picks it up."""

    if not source_system.strip():
        raise ValueError("source_system must not be blank")
    if not external_order_id.strip():
        raise ValueError("external_order_id must not be blank")

    notification = Notification(
        source_system=source_system,
        external_order_id=external_order_id,
        event_id=event_id,
        event_type=event_type,
        occurred_at=occurred_at or utcnow(),
        payload=payload,
    )
    with unit_of_work_factory() as uow:
        uow.repositories.notifications.add(notification)
        uow.commit()

    log.info(
        "Accepted %s notification %s for order %s",
        source_system,
        notification.id,
        external_order_id,
    )
    return notification
