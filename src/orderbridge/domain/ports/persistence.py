"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from orderbridge.domain.model import Notification, Order, ProcessingRun

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from orderbridge.domain.model import ProcessingError


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class NotificationRepository(Repository[Notification], Protocol):
    """Persistence contract for inbound notifications."""

    def pending_ids(self, *, source_system: str | None = None) -> list[UUID]: ...


@runtime_checkable
class OrderRepository(Repository[Order], Protocol):
    """Persistence contract for mirrored orders."""

    def get_by_external_id(self, source_system: str, external_order_id: str) -> Order | None: ...

    def get_by_order_number(self, order_number: str) -> Order | None: ...


@runtime_checkable
class ProcessingRunRepository(Repository[ProcessingRun], Protocol):
    """Persistence contract for the run/error ledger."""

    def latest(self, *, limit: int) -> Sequence[ProcessingRun]: ...

    def errors_for(self, run_id: UUID, *, limit: int) -> Sequence[ProcessingError]: ...
