"""Order verification: exchange checkers, heuristic checker, dispatcher."""

from liqpass.verification.dispatcher import DispatchResponse, VerificationDispatcher, parse_request
from liqpass.verification.models import (
    CheckOutcome,
    CheckResult,
    ExchangeCheckResult,
    HeuristicCheckResult,
    VerificationRequest,
)
from liqpass.verification.registry import CheckerRegistry, build_default_registry

__all__ = [
    "CheckOutcome",
    "CheckResult",
    "CheckerRegistry",
    "DispatchResponse",
    "ExchangeCheckResult",
    "HeuristicCheckResult",
    "VerificationDispatcher",
    "VerificationRequest",
    "build_default_registry",
    "parse_request",
]
