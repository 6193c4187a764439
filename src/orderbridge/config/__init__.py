"""Application configuration helpers."""

from __future__ import annotations

from .acme import AcmeConfig, get_acme_config
from .env import optional_env_float, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .worker import WorkerConfig, get_worker_config

__all__ = [
    "AcmeConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WorkerConfig",
    "configure_logging",
    "get_acme_config",
    "get_database_config",
    "get_storage_config",
    "get_worker_config",
    "optional_env_float",
    "require_env_vars",
]
