"""Order lookup by order number."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from orderbridge.api.deps import UnitOfWorkFactoryDep  # noqa: TC001
from orderbridge.api.schemas import OrderOut
from orderbridge.domain.visibility import find_order

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("/{order_number}", response_model=OrderOut)
def get_order(order_number: str, unit_of_work_factory: UnitOfWorkFactoryDep) -> OrderOut:
    order = find_order(order_number, unit_of_work_factory=unit_of_work_factory)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_number} not found")
    return OrderOut.model_validate(order)
