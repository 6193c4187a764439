"""Business-rule checks applied to fetched order snapshots before they are trusted."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orderbridge.domain.model import OrderSnapshot


class ValidationError(ValueError):
    """Raised when a snapshot violates a required-field or line-item rule."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_snapshot(snapshot: OrderSnapshot) -> None:
    """Raise ``ValidationError`` on the first rule the snapshot breaks."""

    if _is_blank(snapshot.external_order_id):
        raise ValidationError("Order is missing externalOrderId")
    if _is_blank(snapshot.order_number):
        raise ValidationError(f"Order {snapshot.external_order_id} is missing orderNumber")
    if _is_blank(snapshot.currency):
        raise ValidationError(f"Order {snapshot.external_order_id} is missing currency")
    if not snapshot.lines:
        raise ValidationError(f"Order {snapshot.external_order_id} has no lines")

    for line in snapshot.lines:
        if _is_blank(line.sku):
            raise ValidationError(f"Order {snapshot.external_order_id} has a line with a blank SKU")
        if line.quantity <= 0:
            raise ValidationError(f"Invalid quantity {line.quantity} for SKU {line.sku}")
        if line.unit_price < 0:
            raise ValidationError(f"Negative unit price {line.unit_price} for SKU {line.sku}")
