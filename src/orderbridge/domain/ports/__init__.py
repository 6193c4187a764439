"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import OrderSource
from .persistence import (
    NotificationRepository,
    OrderRepository,
    ProcessingRunRepository,
    Repository,
)
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "NotificationRepository",
    "OrderRepository",
    "OrderSource",
    "ProcessingRunRepository",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
