"""Shared HTTP plumbing for the LiqPass service clients."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0


class ApiError(Exception):
    """A LiqPass service answered with a non-2xx status or could not be reached.

    ``status`` is None for transport failures.
    """

    def __init__(self, message: str, status: int | None = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class _ServiceClient:
    """Single-shot JSON requests against one base URL. No retries."""

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        url = self._url(path)
        request_headers = {"Content-Type": "application/json", **(headers or {})}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.request(method, url, json=payload, headers=request_headers)
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"Request to {url} failed: {exc}") from exc

        try:
            body = resp.json() if resp.content else None
        except (json.JSONDecodeError, ValueError):
            body = resp.text

        if resp.status_code >= 400:
            message = body.get("reason") if isinstance(body, dict) else None
            raise ApiError(
                message or f"{method} {url} returned HTTP {resp.status_code}",
                status=resp.status_code,
                body=body,
            )
        return body
