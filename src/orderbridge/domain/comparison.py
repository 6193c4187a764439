"""Detect re-deliveries that would not change the mirrored order."""

from __future__ import annotations

from operator import attrgetter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orderbridge.domain.model import Order, OrderSnapshot

_by_sku = attrgetter("sku")


def snapshot_matches_order(order: Order, snapshot: OrderSnapshot) -> bool:
    """Return True when writing ``snapshot`` over ``order`` would change nothing.

    Scalars must match exactly; lines are compared pairwise after sorting both
    sides by SKU.
    """

    if (
        order.total != snapshot.total
        or order.currency != snapshot.currency
        or order.order_number != snapshot.order_number
        or order.status != snapshot.status
        or order.customer_email != snapshot.customer_email
        or order.order_date != snapshot.order_date
    ):
        return False

    if len(order.lines) != len(snapshot.lines):
        return False

    current = sorted(order.lines, key=_by_sku)
    incoming = sorted(snapshot.lines, key=_by_sku)
    return all(
        existing.sku == line.sku
        and existing.quantity == line.quantity
        and existing.unit_price == line.unit_price
        for existing, line in zip(current, incoming, strict=True)
    )
