"""Reconciliation run ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

from orderbridge.domain.model.base import Entity, utcnow
from orderbridge.domain.model.enums import ItemOutcome, RunStatus

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class ProcessingError(Entity):
    source_system: str
    external_order_id: str
    error_message: str
    occurred_at: datetime = field(default_factory=utcnow)
    processing_run_id: UUID | None = None


@dataclass(eq=False, kw_only=True)
class ProcessingRun(Entity):
    """One polling cycle that had pending work."""

    start_time: datetime = field(default_factory=utcnow)
    end_time: datetime | None = None
    status: RunStatus = RunStatus.RUNNING
    records_processed: int = 0
    records_failed: int = 0
    records_skipped: int = 0
    errors: list[ProcessingError] = field(default_factory=list["ProcessingError"], repr=False)

    @property
    def records_total(self) -> int:
        return self.records_processed + self.records_failed + self.records_skipped

    def record(self, outcome: ItemOutcome) -> None:
        match outcome:
            case ItemOutcome.PROCESSED:
                self.records_processed += 1
            case ItemOutcome.SKIPPED:
                self.records_skipped += 1
            case ItemOutcome.FAILED:
                self.records_failed += 1

    def record_failure(
        self,
        *,
        source_system: str,
        external_order_id: str,
        message: str,
    ) -> ProcessingError:
        error = ProcessingError(
            source_system=source_system,
            external_order_id=external_order_id,
            error_message=message,
            processing_run_id=self.id,
        )
        self.errors.append(error)
        self.record(ItemOutcome.FAILED)
        return error

    def complete(self, *, at: datetime | None = None) -> None:
        self.status = RunStatus.COMPLETED
        self.end_time = at or utcnow()
