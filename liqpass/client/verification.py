"""Client for the verification gateway.

Turns gateway replies (and HTTP failures) into a ``VerificationOutcome`` the
purchase flow can act on: whether the order is eligible for cover and
whether re-verifying makes sense.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from liqpass.client.base import ApiError, _ServiceClient
from liqpass.client.models import VerificationOutcome, VerificationResultDetail
from liqpass.config import LiqPassConfig
from liqpass.utils import utc_now_iso
from liqpass.verification.models import VerificationRequest

logger = logging.getLogger(__name__)

# HTTP status -> (status, error code, message, retryable)
_ERROR_MAP: dict[int, tuple[str, str, str, bool]] = {
    401: ("invalid", "AUTHENTICATION_ERROR", "Authentication failed, check API keys or sign in again", False),
    403: ("invalid", "PERMISSION_DENIED", "Permission denied, cannot verify this order", False),
    404: ("failed", "ORDER_NOT_FOUND", "Order not found, check the order reference", True),
    429: ("error", "RATE_LIMIT_EXCEEDED", "Too many requests, try again later", True),
}
_SERVER_ERROR = ("error", "SERVER_ERROR", "Server error, try again later", True)
_UNKNOWN_ERROR = ("error", "UNKNOWN_ERROR", "Verification request failed, try again later", True)


def map_exchange_id(exchange: str) -> str:
    """UI exchange labels ("OKX", "Binance") to gateway ids."""
    return exchange.lower()


def _parsed_fields(exchange: str, pair: str, order_ref: str, diagnostics: Any) -> dict[str, Any]:
    parsed: dict[str, Any] = {"exchange": exchange, "pair": pair, "orderRef": order_ref}
    if isinstance(diagnostics, dict):
        if isinstance(diagnostics.get("side"), str):
            parsed["side"] = diagnostics["side"]
        for key in ("avgPx", "qty", "liqPx"):
            if diagnostics.get(key) is not None:
                parsed[key] = str(diagnostics[key])
    return parsed


def outcome_from_reply(
    raw: dict[str, Any],
    request: VerificationRequest,
    ref_code: str | None = None,
    env: str | None = None,
) -> VerificationOutcome:
    """Map a 2xx gateway body onto a verification outcome."""
    status = raw.get("status") or "ok"
    exchange = raw.get("exchange") or map_exchange_id(request.exchange)
    pair = raw.get("pair") or request.pair
    order_ref = raw.get("orderRef") or request.order_ref
    diagnostics = raw.get("diagnostics")

    if status == "ok":
        verification_status, eligible = "success", True
        detail = VerificationResultDetail(
            code="VERIFICATION_SUCCESS",
            message="Order verified, eligible for cover",
            severity="success",
        )
    elif status == "fail":
        verification_status, eligible = "failed", False
        detail = VerificationResultDetail(
            code="VERIFICATION_FAILED",
            message="Order verification failed, not eligible for cover",
            severity="error",
        )
    else:
        verification_status, eligible = "warning", True
        detail = VerificationResultDetail(
            code="VERIFICATION_WARNING",
            message="Order verification returned a warning, check the order details",
            severity="warning",
        )

    evidence_hint = None
    if isinstance(diagnostics, dict) and "message" in diagnostics:
        evidence_hint = str(diagnostics.get("message") or "")

    return VerificationOutcome(
        status=verification_status,
        exchange=exchange,
        pair=pair,
        orderRef=order_ref,
        eligible=eligible,
        parsed=_parsed_fields(exchange, pair, order_ref, diagnostics),
        diag=[diagnostics] if diagnostics else None,
        evidenceHint=evidence_hint,
        refCode=ref_code,
        env=env,
        details=[detail],
        timestamp=utc_now_iso(),
        retryable=verification_status != "success",
    )


def outcome_from_error(error: ApiError, request: VerificationRequest) -> VerificationOutcome:
    """Map a failed gateway call onto a verification outcome."""
    if error.status in _ERROR_MAP:
        status, code, message, retryable = _ERROR_MAP[error.status]
    elif error.status is not None and error.status >= 500:
        status, code, message, retryable = _SERVER_ERROR
    else:
        status, code, message, retryable = _UNKNOWN_ERROR

    return VerificationOutcome(
        status=status,
        exchange=map_exchange_id(request.exchange),
        pair=request.pair,
        orderRef=request.order_ref,
        eligible=False,
        errorCode=code,
        errorMessage=message,
        details=[
            VerificationResultDetail(
                code=code,
                message=message,
                severity="error" if status in ("error", "failed") else "warning",
            )
        ],
        timestamp=utc_now_iso(),
        retryable=retryable,
    )


class VerificationClient(_ServiceClient):
    """Submit orders to ``POST /verify/order`` on the gateway."""

    def __init__(self, config: LiqPassConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(base_url=config.jp_api_base, transport=transport)

    async def submit_verification(
        self,
        request: VerificationRequest,
        auth_token: str | None = None,
        ref_code: str | None = None,
        env: str | None = None,
    ) -> VerificationOutcome:
        payload = {
            "exchange": map_exchange_id(request.exchange),
            "pair": request.pair,
            "orderRef": request.order_ref,
            "wallet": request.wallet,
        }
        headers = {"Authorization": f"Bearer {auth_token}"} if auth_token else None

        try:
            raw = await self._request("POST", "/verify/order", payload=payload, headers=headers)
        except ApiError as exc:
            logger.error("Verification request failed: %s", exc)
            return outcome_from_error(exc, request)

        return outcome_from_reply(raw if isinstance(raw, dict) else {}, request, ref_code=ref_code, env=env)
