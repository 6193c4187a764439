"""Transient views of an order as reported by the external source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal


@dataclass(frozen=True, slots=True)
class LineSnapshot:
    sku: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True, slots=True)
class OrderSnapshot:
    """Authoritative order state fetched from the source; never persisted as-is."""

    external_order_id: str
    order_number: str
    total: Decimal
    currency: str
    order_date: datetime
    status: str
    customer_email: str | None = None
    lines: tuple[LineSnapshot, ...] = field(default_factory=tuple)
