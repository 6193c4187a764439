"""Locally mirrored orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from orderbridge.domain.model.base import Entity

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from decimal import Decimal

    from orderbridge.domain.model.snapshot import LineSnapshot, OrderSnapshot


@dataclass(eq=False, kw_only=True)
class OrderLine(Entity):
    sku: str
    quantity: int
    unit_price: Decimal
    position: int = 0


@dataclass(eq=False, kw_only=True)
class Order(Entity):
    """Mirror of an external order, unique per (source_system, external_order_id)."""

    source_system: str
    external_order_id: str
    order_number: str
    total: Decimal
    currency: str
    order_date: datetime
    status: str
    customer_email: str | None = None
    lines: list[OrderLine] = field(default_factory=list["OrderLine"])

    @classmethod
    def from_snapshot(cls, source_system: str, snapshot: OrderSnapshot) -> Order:
        order = cls(
            source_system=source_system,
            external_order_id=snapshot.external_order_id,
            order_number=snapshot.order_number,
            total=snapshot.total,
            currency=snapshot.currency,
            order_date=snapshot.order_date,
            status=snapshot.status,
            customer_email=snapshot.customer_email,
        )
        order.replace_lines(snapshot.lines)
        return order

    def apply_snapshot(self, snapshot: OrderSnapshot) -> None:
        """Overwrite scalar fields and replace every line with the snapshot's."""

        self.order_number = snapshot.order_number
        self.total = snapshot.total
        self.currency = snapshot.currency
        self.order_date = snapshot.order_date
        self.status = snapshot.status
        self.customer_email = snapshot.customer_email
        self.replace_lines(snapshot.lines)

    def replace_lines(self, lines: Iterable[LineSnapshot]) -> None:
        self.lines = [
            OrderLine(sku=line.sku, quantity=line.quantity, unit_price=line.unit_price, position=i)
            for i, line in enumerate(lines)
        ]
