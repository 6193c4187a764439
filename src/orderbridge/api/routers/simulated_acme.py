"""The simulated Acme order API served over HTTP, for local end-to-end runs."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from orderbridge.adapters.acme.simulator import (
    SIMULATED_FAILURE_MESSAGE,
    is_simulated_failure,
    simulated_order_payload,
)

router = APIRouter(prefix="/external-api/orders", tags=["simulator"])


@router.get("/{external_order_id}", response_model=None)
def get_simulated_order(external_order_id: str) -> dict[str, object] | PlainTextResponse:
    if is_simulated_failure(external_order_id):
        return PlainTextResponse(SIMULATED_FAILURE_MESSAGE, status_code=500)
    return simulated_order_payload(external_order_id)
