"""Inbound order-change notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from orderbridge.domain.model.base import Entity, utcnow
from orderbridge.domain.model.enums import NotificationStatus

if TYPE_CHECKING:
    from datetime import datetime


class NotificationStateError(RuntimeError):
    """Raised when a notification would leave a terminal status."""


@dataclass(eq=False, kw_only=True)
class Notification(Entity):
    """One inbound webhook event.

    Status only ever moves Pending -> Processed or Pending -> Failed.
    """

    source_system: str
    external_order_id: str
    event_id: str = ""
    event_type: str = ""
    occurred_at: datetime = field(default_factory=utcnow)
    payload: str | None = None
    status: NotificationStatus = NotificationStatus.PENDING
    attempts: int = 0
    last_error: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is NotificationStatus.PENDING

    def mark_processed(self) -> None:
        self._transition(NotificationStatus.PROCESSED)
        self.last_error = None

    def mark_failed(self, message: str) -> None:
        self._transition(NotificationStatus.FAILED)
        self.last_error = message

    def _transition(self, target: NotificationStatus) -> None:
        if not self.is_pending:
            raise NotificationStateError(
                f"Notification {self.id} is already {self.status}; cannot move to {target}"
            )
        self.status = target
        self.attempts += 1
