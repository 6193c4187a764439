"""Acme order API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

ACME_TIMEOUT_SECONDS = 10.0
SIMULATED_ACME_BASE_URL = "http://acme.simulated/external-api/"


@dataclass(frozen=True, slots=True)
class AcmeConfig:
    resilience: ResilienceConfig


def _resilience(base_url: str, timeout_seconds: float) -> ResilienceConfig:
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"
    return ResilienceConfig(
        name="acme",
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        retry=RetryPolicy(),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Accept": "application/json"},
    )


def get_acme_config(*, simulate: bool = False) -> AcmeConfig:
    timeout = optional_env_float("ACME_TIMEOUT_SECONDS", ACME_TIMEOUT_SECONDS)
    if simulate:
        return AcmeConfig(resilience=_resilience(SIMULATED_ACME_BASE_URL, timeout))
    values = require_env_vars(("ACME_BASE_URL",))
    return AcmeConfig(resilience=_resilience(values["ACME_BASE_URL"], timeout))
