"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class NotificationStatus(StrEnum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self is not NotificationStatus.PENDING


class RunStatus(StrEnum):
    RUNNING = "Running"
    COMPLETED = "Completed"


class ItemOutcome(StrEnum):
    """Result of reconciling a single notification."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"
