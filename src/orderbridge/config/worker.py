"""Reconciliation worker settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import optional_env_float
from .errors import ConfigurationError

DEFAULT_SOURCE_SYSTEM = "Acme"
DEFAULT_POLL_INTERVAL_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class WorkerConfig:
    source_system: str = DEFAULT_SOURCE_SYSTEM
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS


def get_worker_config() -> WorkerConfig:
    source_system = os.getenv("ORDERBRIDGE_SOURCE_SYSTEM", DEFAULT_SOURCE_SYSTEM).strip()
    if not source_system:
        raise ConfigurationError("ORDERBRIDGE_SOURCE_SYSTEM must not be blank")
    return WorkerConfig(
        source_system=source_system,
        poll_interval_seconds=optional_env_float(
            "ORDERBRIDGE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_SECONDS
        ),
    )
