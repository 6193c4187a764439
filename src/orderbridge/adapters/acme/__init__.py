"""Public interface for the Acme order-source adapter."""

from __future__ import annotations

from .client import AcmeAPIError, AcmeOrderClient
from .schema import AcmeCustomer, AcmeOrderLine, AcmeOrderResponse
from .simulator import simulated_client_factory, simulated_order_payload, simulated_transport
from .translator import to_order_snapshot

__all__ = [
    "AcmeAPIError",
    "AcmeCustomer",
    "AcmeOrderClient",
    "AcmeOrderLine",
    "AcmeOrderResponse",
    "simulated_client_factory",
    "simulated_order_payload",
    "simulated_transport",
    "to_order_snapshot",
]
