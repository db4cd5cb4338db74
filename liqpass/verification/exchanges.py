"""Order checkers backed by exchange private REST APIs.

Each checker is fail-closed: missing credentials, transport failures,
non-2xx replies and unparseable bodies all come back as an unverified
``ExchangeCheckResult`` and are logged, never raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from liqpass.config import LiqPassConfig
from liqpass.utils import now_ms, utc_now_iso
from liqpass.verification.models import (
    CheckOutcome,
    ExchangeCheckResult,
    VerificationRequest,
)
from liqpass.verification.signing import (
    OKX_ORDER_PATH,
    binance_signed_path,
    okx_headers,
    okx_query_string,
    okx_signature,
)

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0


class UpstreamError(Exception):
    """An exchange could not be reached or replied with something unusable."""


class _ExchangeClient:
    """Shared HTTP plumbing for exchange order lookups."""

    name = "exchange"

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Issue one GET and return the decoded JSON body. No retries."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, params=params, headers=headers)
                resp.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as exc:
            raise UpstreamError(f"{self.name} request to {path} failed: {exc}") from exc

        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise UpstreamError(
                f"Non-JSON response from {self.name} (status {resp.status_code})"
            ) from exc


class OKXChecker(_ExchangeClient):
    """Look an order up by client order id on OKX.

    Docs: https://www.okx.com/docs-v5/en/#order-book-trading-trade-get-get-order-details
    """

    name = "okx"

    def __init__(self, config: LiqPassConfig, **kwargs: Any) -> None:
        super().__init__(base_url=config.okx_base_url, **kwargs)
        self._api_key = config.okx_api_key
        self._secret_key = config.okx_secret_key
        self._passphrase = config.okx_passphrase

    async def check(self, request: VerificationRequest) -> ExchangeCheckResult:
        if not (self._api_key and self._secret_key and self._passphrase):
            logger.error("OKX API credentials not configured")
            return ExchangeCheckResult.rejected(
                CheckOutcome.UNCONFIGURED, "OKX API credentials not configured"
            )

        timestamp = utc_now_iso()
        signature = okx_signature(
            self._secret_key,
            timestamp,
            method="GET",
            request_path=OKX_ORDER_PATH,
            query_string=okx_query_string(request.pair, request.order_ref),
        )
        headers = okx_headers(self._api_key, self._passphrase, timestamp, signature)

        try:
            body = await self._get(
                OKX_ORDER_PATH,
                params={"instId": request.pair, "clOrdId": request.order_ref},
                headers=headers,
            )
        except UpstreamError as exc:
            logger.error("OKX order verification failed: %s", exc)
            return ExchangeCheckResult.rejected(CheckOutcome.UNREACHABLE, str(exc))

        orders = body.get("data") if isinstance(body, dict) else None
        if isinstance(orders, list) and orders:
            return ExchangeCheckResult.confirmed()
        return ExchangeCheckResult.rejected(CheckOutcome.NOT_FOUND, "No matching OKX order")


class BinanceChecker(_ExchangeClient):
    """Look an order up by ``origClientOrderId`` on Binance spot.

    Docs: https://developers.binance.com/docs/binance-spot-api-docs/rest-api/trading-endpoints
    """

    name = "binance"

    def __init__(self, config: LiqPassConfig, **kwargs: Any) -> None:
        super().__init__(base_url=config.binance_base_url, **kwargs)
        self._api_key = config.binance_api_key
        self._secret_key = config.binance_secret_key

    async def check(self, request: VerificationRequest) -> ExchangeCheckResult:
        if not (self._api_key and self._secret_key):
            logger.error("Binance API credentials not configured")
            return ExchangeCheckResult.rejected(
                CheckOutcome.UNCONFIGURED, "Binance API credentials not configured"
            )

        path = binance_signed_path(request.pair, request.order_ref, now_ms(), self._secret_key)
        try:
            body = await self._get(path, headers={"X-MBX-APIKEY": self._api_key})
        except UpstreamError as exc:
            logger.error("Binance order verification failed: %s", exc)
            return ExchangeCheckResult.rejected(CheckOutcome.UNREACHABLE, str(exc))

        if isinstance(body, dict) and body.get("orderId"):
            return ExchangeCheckResult.confirmed()
        return ExchangeCheckResult.rejected(CheckOutcome.NOT_FOUND, "No matching Binance order")
