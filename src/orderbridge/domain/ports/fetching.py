"""Ports for fetching authoritative order state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from orderbridge.domain.model import OrderSnapshot


@runtime_checkable
class OrderSource(Protocol):
    """Fetches the authoritative snapshot of one external order.

    Implementations raise on any transport or remote failure; they do not
    validate the snapshot.
    """

    def fetch_order(self, external_order_id: str) -> OrderSnapshot: ...


__all__ = ["OrderSource"]
