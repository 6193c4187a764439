"""Translate Acme payloads into order snapshots."""

from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING

from orderbridge.domain.model import LineSnapshot, OrderSnapshot

from .schema import AcmeOrderResponse

if TYPE_CHECKING:
    from collections.abc import Mapping


def to_order_snapshot(payload: AcmeOrderResponse | Mapping[str, object]) -> OrderSnapshot:
    response = (
        payload
        if isinstance(payload, AcmeOrderResponse)
        else AcmeOrderResponse.model_validate(payload)
    )
    order_date = response.order_date
    if order_date.tzinfo is None:
        order_date = order_date.replace(tzinfo=UTC)

    return OrderSnapshot(
        external_order_id=response.external_order_id,
        order_number=response.order_number,
        total=response.order_total,
        currency=response.currency,
        order_date=order_date.astimezone(UTC),
        status=response.status,
        customer_email=response.customer.email if response.customer else None,
        lines=tuple(
            LineSnapshot(sku=line.sku, quantity=line.qty, unit_price=line.unit_price)
            for line in response.lines
        ),
    )
