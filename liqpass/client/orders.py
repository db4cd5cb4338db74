"""Client for the order/claim backend.

Both write endpoints accept an optional ``Idempotency-Key`` header; the
backend owns de-duplication, this client only forwards the key.
"""

from __future__ import annotations

import uuid

import httpx

from liqpass.client.base import _ServiceClient
from liqpass.client.models import ClaimRecord, CreateClaimRequest, CreateOrderRequest, OrderRecord
from liqpass.config import LiqPassConfig


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


def _idempotency_headers(idempotency_key: str | None) -> dict[str, str] | None:
    return {"Idempotency-Key": idempotency_key} if idempotency_key else None


class OrderClient(_ServiceClient):
    def __init__(self, config: LiqPassConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(base_url=config.us_api_base, transport=transport)

    async def create_order(self, payload: CreateOrderRequest, idempotency_key: str | None = None) -> OrderRecord:
        body = await self._request(
            "POST", "/orders", payload=payload.model_dump(), headers=_idempotency_headers(idempotency_key)
        )
        return OrderRecord.model_validate(body)

    async def create_claim(self, payload: CreateClaimRequest, idempotency_key: str | None = None) -> ClaimRecord:
        body = await self._request(
            "POST", "/claim", payload=payload.model_dump(), headers=_idempotency_headers(idempotency_key)
        )
        return ClaimRecord.model_validate(body)
