"""Verification request and result objects shared by checkers and the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union

EXCHANGE_OKX = "okx"
EXCHANGE_BINANCE = "binance"
EXCHANGE_GOOGLE_MCP = "google-mcp"

RiskLevel = Literal["low", "medium", "high"]
RISK_LEVELS: tuple[str, ...] = ("low", "medium", "high")


@dataclass(frozen=True)
class VerificationRequest:
    """One order-authenticity check as submitted by a caller.

    ``order_ref`` and ``wallet`` are opaque and only checked for presence.
    """

    exchange: str
    pair: str
    order_ref: str
    wallet: str

    @property
    def exchange_id(self) -> str:
        return self.exchange.lower()


class CheckOutcome(str, Enum):
    """Why a classical exchange check came back the way it did.

    Only ``CONFIRMED`` maps to a positive verdict; the other values keep
    "could not reach the exchange" apart from "the exchange said no".
    """

    CONFIRMED = "confirmed"
    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"
    UNCONFIGURED = "unconfigured"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ExchangeCheckResult:
    """Boolean verdict from an exchange REST lookup."""

    verified: bool
    outcome: CheckOutcome
    reason: str = ""
    kind: Literal["exchange"] = field(default="exchange", init=False)

    @classmethod
    def confirmed(cls) -> ExchangeCheckResult:
        return cls(verified=True, outcome=CheckOutcome.CONFIRMED)

    @classmethod
    def rejected(cls, outcome: CheckOutcome, reason: str = "") -> ExchangeCheckResult:
        return cls(verified=False, outcome=outcome, reason=reason)


@dataclass(frozen=True)
class HeuristicCheckResult:
    """Structured plausibility assessment from the language-model checker.

    source values:
    - json: model replied with a JSON object
    - fallback: keyword matching on free text
    - error: model was unavailable or the call failed
    """

    valid: bool
    confidence: int | float
    details: str
    risk_level: RiskLevel
    source: Literal["json", "fallback", "error"] = "json"
    kind: Literal["heuristic"] = field(default="heuristic", init=False)

    @classmethod
    def failure(cls, details: str) -> HeuristicCheckResult:
        return cls(valid=False, confidence=0, details=details, risk_level="high", source="error")


CheckResult = Union[ExchangeCheckResult, HeuristicCheckResult]
