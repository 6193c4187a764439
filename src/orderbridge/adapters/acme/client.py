"""HTTP client for the Acme order API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, cast
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PayloadValidationError

from orderbridge.adapters.http_resilience import ResilientClient

from .schema import AcmeOrderResponse
from .translator import to_order_snapshot

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from orderbridge.config.acme import AcmeConfig
    from orderbridge.config.http_resilience import ResilienceConfig
    from orderbridge.domain.model import OrderSnapshot

log = getLogger(__name__)


class AcmeAPIError(RuntimeError):
    """Raised when the Acme API answers with an error or an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AcmeOrderClient:
    """Order source backed by the Acme order API.

    One event loop and one HTTP client (with its rate limiter) are kept open
    across fetches until ``close()``.
    """

    def __init__(
        self,
        *,
        config: AcmeConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._runner: asyncio.Runner | None = None
        self._client: ResilientClient | None = None

    def __enter__(self) -> AcmeOrderClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def fetch_order(self, external_order_id: str) -> OrderSnapshot:
        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(self._fetch_order_async(external_order_id))

    def close(self) -> None:
        """Close the HTTP client and its event loop; a later fetch opens fresh ones."""

        if self._runner is None:
            return
        try:
            if self._client is not None:
                self._runner.run(self._client.aclose())
        finally:
            self._client = None
            self._runner.close()
            self._runner = None

    async def _fetch_order_async(self, external_order_id: str) -> OrderSnapshot:
        if self._resilience.base_url is None:
            raise AcmeAPIError("Missing Acme base_url in resilience configuration")

        if self._client is None:
            self._client = self._client_factory(self._resilience)
        response = await self._perform_request(
            client=self._client,
            path=f"orders/{quote(external_order_id, safe='')}",
        )
        return to_order_snapshot(response)

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        path: str,
    ) -> AcmeOrderResponse:
        response = await client.get(path)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = response.text.strip()
            message = f"Acme API returned {response.status_code} for {path}"
            if detail:
                message = f"{message}: {detail}"
            log.debug(message)
            raise AcmeAPIError(message, status_code=response.status_code) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise AcmeAPIError("Acme API returned a non-JSON payload") from exc
        if not isinstance(payload, dict):
            raise AcmeAPIError("Unexpected Acme response payload")

        try:
            return AcmeOrderResponse.model_validate(payload)
        except PayloadValidationError as exc:
            message = f"Malformed Acme order payload: {exc.error_count()} error(s)"
            raise AcmeAPIError(message) from exc


if TYPE_CHECKING:
    from orderbridge.domain.ports import OrderSource

    _source_check: OrderSource = AcmeOrderClient(config=cast("AcmeConfig", object()))
