"""In-process stand-in for the Acme order API.

Serves ``GET .../orders/{externalOrderId}`` with canned data. Ids containing
``FAIL`` produce a server error and ids containing ``INVALID`` produce an
order whose only line has quantity -1, which the order validator rejects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from orderbridge.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from orderbridge.config.http_resilience import ResilienceConfig

SIMULATED_ORDER_DATE = "2026-02-18T10:00:00+00:00"
SIMULATED_CUSTOMER_EMAIL = "integrated.customer@example.com"
SIMULATED_FAILURE_MESSAGE = "Simulated External API Failure"


def is_simulated_failure(external_order_id: str) -> bool:
    return "FAIL" in external_order_id


def simulated_order_payload(external_order_id: str) -> dict[str, object]:
    suffix = external_order_id.split("_")[1] if "_" in external_order_id else external_order_id
    return {
        "externalOrderId": external_order_id,
        "orderNumber": f"SO-{suffix}",
        "orderTotal": "150.00",
        "currency": "USD",
        "orderDate": SIMULATED_ORDER_DATE,
        "status": "SHIPPED",
        "customer": {"email": SIMULATED_CUSTOMER_EMAIL},
        "lines": [
            {
                "sku": "PROD-001",
                "qty": -1 if "INVALID" in external_order_id else 1,
                "unitPrice": "150.00",
            }
        ],
    }


def handle_request(request: httpx.Request) -> httpx.Response:
    segments = [segment for segment in request.url.path.split("/") if segment]
    if request.method != "GET" or len(segments) < 2 or segments[-2] != "orders":
        return httpx.Response(404, text="Not Found")

    external_order_id = segments[-1]
    if is_simulated_failure(external_order_id):
        return httpx.Response(500, text=SIMULATED_FAILURE_MESSAGE)
    return httpx.Response(200, json=simulated_order_payload(external_order_id))


def simulated_transport() -> httpx.MockTransport:
    return httpx.MockTransport(handle_request)


def simulated_client_factory() -> Callable[[ResilienceConfig], ResilientClient]:
    def factory(config: ResilienceConfig) -> ResilientClient:
        return ResilientClient(config, transport=simulated_transport())

    return factory
