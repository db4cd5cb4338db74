"""Product catalog lookup (``GET /catalog/skus``)."""

from __future__ import annotations

from typing import Any

import httpx

from liqpass.client.base import _ServiceClient
from liqpass.client.models import SkuOption
from liqpass.config import LiqPassConfig

DEFAULT_SKU_CODE = "DAY_24H_FIXED"


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def normalise_sku(raw: Any) -> SkuOption:
    """Accept the several SKU shapes the backend has served over time."""
    if isinstance(raw, str):
        return SkuOption(code=raw, label=raw, raw=raw)

    code = str(raw.get("skuCode") or raw.get("code") or raw.get("id") or "").strip()
    label_source = next(
        (raw.get(k) for k in ("label", "title", "name", "description", "detail") if raw.get(k)),
        code,
    )
    label = str(label_source or "SKU").strip() or code or "SKU"
    description = raw.get("description") or raw.get("detail")
    exchange = raw.get("exchange")

    return SkuOption(
        code=code or label,
        label=label,
        description=description if isinstance(description, str) else None,
        premium=_number(raw.get("premium")),
        payout=_number(raw.get("payout")),
        exchange=exchange if isinstance(exchange, str) and exchange else None,
        raw=raw,
    )


def normalise_catalog(response: Any) -> list[SkuOption]:
    """Turn a catalog body (list or ``{"skus": [...]}``) into SKU options."""
    items = None
    if isinstance(response, list):
        items = response
    elif isinstance(response, dict) and isinstance(response.get("skus"), list):
        items = response["skus"]

    if items is not None:
        options = [normalise_sku(item) for item in items if isinstance(item, (str, dict))]
        return [option for option in options if option.code]

    return [SkuOption(code=DEFAULT_SKU_CODE, label=DEFAULT_SKU_CODE, raw=response)]


class CatalogClient(_ServiceClient):
    def __init__(self, config: LiqPassConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(base_url=config.us_api_base, transport=transport)

    async def fetch_skus(self) -> list[SkuOption]:
        return normalise_catalog(await self._request("GET", "/catalog/skus"))
