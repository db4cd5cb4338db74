"""Route verification requests to checkers and shape the HTTP envelope.

Status mapping:
- 400 ``fail``: exchange, pair, orderRef or wallet missing/empty
- 200 ``ok``: stub mode, or the checker confirmed the order
- 404 ``fail``: the checker did not confirm the order
- 500 ``error``: anything raised while checking or shaping the reply
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from liqpass.config import LiqPassConfig
from liqpass.utils import utc_now_iso
from liqpass.verification.models import (
    CheckResult,
    HeuristicCheckResult,
    VerificationRequest,
)
from liqpass.verification.registry import CheckerRegistry

logger = logging.getLogger(__name__)

MISSING_FIELDS_REASON = "Missing exchange, pair, orderRef, or wallet"
NOT_FOUND_REASON = "Order not found or invalid"
INTERNAL_ERROR_REASON = "Internal server error during verification"

_REQUIRED_FIELDS = ("exchange", "pair", "orderRef", "wallet")


@dataclass(frozen=True)
class DispatchResponse:
    status_code: int
    body: dict[str, Any]


def parse_request(payload: Any) -> VerificationRequest | None:
    """Build a request from a decoded JSON body, or None if a field is missing."""
    if not isinstance(payload, dict):
        return None
    values = [payload.get(name) for name in _REQUIRED_FIELDS]
    if not all(isinstance(v, str) and v for v in values):
        return None
    exchange, pair, order_ref, wallet = values
    return VerificationRequest(exchange=exchange, pair=pair, order_ref=order_ref, wallet=wallet)


class VerificationDispatcher:
    """Stub/real verification front door used by the ``/verify/order`` route."""

    def __init__(self, config: LiqPassConfig, registry: CheckerRegistry):
        self.config = config
        self.registry = registry

    @property
    def verify_mode(self) -> str:
        return self.config.verify_mode

    async def dispatch(self, payload: Any) -> DispatchResponse:
        request = parse_request(payload)
        if request is None:
            return DispatchResponse(400, {"status": "fail", "reason": MISSING_FIELDS_REASON})

        if self.verify_mode == "stub":
            return DispatchResponse(200, self._stub_body(request))

        try:
            result = await self.check(request)
            return self._shape(request, result)
        except Exception as exc:
            logger.exception("Verification of %s order %s failed", request.exchange, request.order_ref)
            return DispatchResponse(
                500,
                {
                    "status": "error",
                    "reason": INTERNAL_ERROR_REASON,
                    "diagnostics": {
                        "message": str(exc),
                        "verifyMode": self.verify_mode,
                        "errorAt": utc_now_iso(),
                    },
                },
            )

    async def check(self, request: VerificationRequest) -> CheckResult:
        checker = self.registry.get(request.exchange_id)
        return await checker.check(request)

    # ------------------------------------------------------------------
    # Envelope shaping
    # ------------------------------------------------------------------

    def _echo(self, request: VerificationRequest) -> dict[str, Any]:
        return {
            "exchange": request.exchange,
            "pair": request.pair,
            "orderRef": request.order_ref,
            "wallet": request.wallet,
        }

    def _stub_body(self, request: VerificationRequest) -> dict[str, Any]:
        return {
            "status": "ok",
            **self._echo(request),
            "diagnostics": {
                "message": "Verification stub response",
                "verifyMode": self.verify_mode,
                "receivedAt": utc_now_iso(),
            },
        }

    def _shape(self, request: VerificationRequest, result: CheckResult) -> DispatchResponse:
        if isinstance(result, HeuristicCheckResult):
            return self._shape_heuristic(request, result)

        if result.verified:
            return DispatchResponse(
                200,
                {
                    "status": "ok",
                    **self._echo(request),
                    "diagnostics": {
                        "message": "Order successfully verified",
                        "verifyMode": self.verify_mode,
                        "verifiedAt": utc_now_iso(),
                    },
                },
            )
        return DispatchResponse(
            404,
            {
                "status": "fail",
                "reason": NOT_FOUND_REASON,
                "diagnostics": {
                    "message": "Order verification failed",
                    "verifyMode": self.verify_mode,
                    "failedAt": utc_now_iso(),
                    "outcome": result.outcome.value,
                },
            },
        )

    def _shape_heuristic(self, request: VerificationRequest, result: HeuristicCheckResult) -> DispatchResponse:
        if result.valid:
            return DispatchResponse(
                200,
                {
                    "status": "ok",
                    **self._echo(request),
                    "confidence": result.confidence,
                    "riskLevel": result.risk_level,
                    "details": result.details,
                    "diagnostics": {
                        "message": "Order successfully verified via Google MCP",
                        "verifyMode": self.verify_mode,
                        "verifiedAt": utc_now_iso(),
                    },
                },
            )
        return DispatchResponse(
            404,
            {
                "status": "fail",
                "reason": result.details or NOT_FOUND_REASON,
                "confidence": result.confidence,
                "riskLevel": result.risk_level,
                "diagnostics": {
                    "message": "Order verification failed via Google MCP",
                    "verifyMode": self.verify_mode,
                    "failedAt": utc_now_iso(),
                },
            },
        )
