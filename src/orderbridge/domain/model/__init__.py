"""Domain model for mirrored orders and their reconciliation ledger."""

from __future__ import annotations

from .base import Entity, new_id, utcnow
from .enums import ItemOutcome, NotificationStatus, RunStatus
from .notification import Notification, NotificationStateError
from .order import Order, OrderLine
from .run import ProcessingError, ProcessingRun
from .snapshot import LineSnapshot, OrderSnapshot

__all__ = [
    "Entity",
    "ItemOutcome",
    "LineSnapshot",
    "Notification",
    "NotificationStateError",
    "NotificationStatus",
    "Order",
    "OrderLine",
    "OrderSnapshot",
    "ProcessingError",
    "ProcessingRun",
    "RunStatus",
    "new_id",
    "utcnow",
]
