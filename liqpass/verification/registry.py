"""Exchange id → order checker lookup."""

from __future__ import annotations

import logging
from typing import Protocol

from liqpass.config import LiqPassConfig
from liqpass.llm.adapter import TextModel, build_text_model
from liqpass.verification.exchanges import BinanceChecker, OKXChecker
from liqpass.verification.heuristic import HeuristicChecker
from liqpass.verification.models import (
    EXCHANGE_BINANCE,
    EXCHANGE_GOOGLE_MCP,
    EXCHANGE_OKX,
    CheckOutcome,
    CheckResult,
    ExchangeCheckResult,
    VerificationRequest,
)

logger = logging.getLogger(__name__)


class OrderChecker(Protocol):
    async def check(self, request: VerificationRequest) -> CheckResult: ...


class _UnsupportedExchange:
    """Resolves any unknown exchange id to "not verified"."""

    async def check(self, request: VerificationRequest) -> ExchangeCheckResult:
        logger.warning("Unsupported exchange: %s", request.exchange)
        return ExchangeCheckResult.rejected(
            CheckOutcome.UNSUPPORTED, f"Unsupported exchange: {request.exchange}"
        )


class CheckerRegistry:
    """Maps lower-cased exchange identifiers to checkers."""

    def __init__(self, checkers: dict[str, OrderChecker] | None = None):
        self._checkers: dict[str, OrderChecker] = {}
        self._unsupported = _UnsupportedExchange()
        for exchange_id, checker in (checkers or {}).items():
            self.register(exchange_id, checker)

    def register(self, exchange_id: str, checker: OrderChecker) -> None:
        self._checkers[exchange_id.lower()] = checker

    def get(self, exchange_id: str) -> OrderChecker:
        return self._checkers.get(exchange_id.lower(), self._unsupported)

    def __contains__(self, exchange_id: str) -> bool:
        return exchange_id.lower() in self._checkers

    @property
    def exchanges(self) -> list[str]:
        return sorted(self._checkers)


def build_default_registry(config: LiqPassConfig, text_model: TextModel | None = None) -> CheckerRegistry:
    """Registry with the OKX, Binance and heuristic checkers wired to ``config``."""
    return CheckerRegistry(
        {
            EXCHANGE_OKX: OKXChecker(config),
            EXCHANGE_BINANCE: BinanceChecker(config),
            EXCHANGE_GOOGLE_MCP: HeuristicChecker(text_model or build_text_model(config)),
        }
    )
