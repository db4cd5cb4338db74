"""Language-model heuristic checker ("google-mcp").

Asks a text model whether an order reference looks plausible and parses the
reply in two tiers:

1. JSON object (bare, or inside a ```json fence) with ``valid``,
   ``confidence``, ``details`` and ``riskLevel``.
2. Keyword fallback on the raw text when no JSON object can be read.

Missing credentials, empty replies and transport errors all produce an
invalid, high-risk result. This checker never raises.
"""

from __future__ import annotations

import json
import logging
import math
import re

from liqpass.llm.adapter import TextModel
from liqpass.llm.prompts import build_order_assessment_prompt
from liqpass.verification.models import (
    RISK_LEVELS,
    HeuristicCheckResult,
    VerificationRequest,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

# Terms meaning "valid / genuine / confirmed / exists"
_VALID_KEYWORDS = ("有效", "真实", "确认", "存在")

# Applied in order; a later match overrides an earlier one.
_CONFIDENCE_KEYWORDS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("高置信度", "高度确认"), 85),
    (("中等", "部分"), 60),
    (("低", "不确定"), 30),
)
_BASE_FALLBACK_CONFIDENCE = 50


def clamp_confidence(raw: object) -> int | float:
    """Coerce a model-supplied confidence to a number in [0, 100].

    Non-numeric values count as 0.
    """
    if isinstance(raw, bool):
        value = float(raw)
    elif isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            value = 0.0
    else:
        value = 0.0

    if math.isnan(value):
        value = 0.0
    value = min(100.0, max(0.0, value))
    return int(value) if value.is_integer() else value


def risk_from_confidence(confidence: int | float) -> str:
    if confidence > 70:
        return "low"
    if confidence > 40:
        return "medium"
    return "high"


def _extract_json_object(text: str) -> dict | None:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    fence_match = _FENCE_RE.search(text)
    if fence_match:
        try:
            parsed = json.loads(fence_match.group(1))
        except json.JSONDecodeError:
            return None
        if isinstance(parsed, dict):
            return parsed
    return None


def parse_structured_reply(data: dict) -> HeuristicCheckResult:
    risk = data.get("riskLevel")
    risk = risk.lower() if isinstance(risk, str) else ""
    return HeuristicCheckResult(
        valid=bool(data.get("valid")),
        confidence=clamp_confidence(data.get("confidence")),
        details=str(data.get("details") or "Verification completed"),
        risk_level=risk if risk in RISK_LEVELS else "medium",
        source="json",
    )


def parse_free_text(text: str) -> HeuristicCheckResult:
    """Keyword-based verdict for replies that are not JSON."""
    lowered = text.lower()
    valid = any(term in lowered for term in _VALID_KEYWORDS)

    confidence = _BASE_FALLBACK_CONFIDENCE
    for terms, score in _CONFIDENCE_KEYWORDS:
        if any(term in lowered for term in terms):
            confidence = score

    return HeuristicCheckResult(
        valid=valid,
        confidence=confidence,
        details="Completed using fallback keyword verification",
        risk_level=risk_from_confidence(confidence),
        source="fallback",
    )


def parse_model_text(text: str) -> HeuristicCheckResult:
    data = _extract_json_object(text)
    if data is not None:
        return parse_structured_reply(data)
    logger.warning("Failed to parse heuristic model JSON response, using fallback logic")
    return parse_free_text(text)


class HeuristicChecker:
    """Order checker backed by a generative text model."""

    name = "google-mcp"

    def __init__(self, model: TextModel):
        self.model = model

    async def check(self, request: VerificationRequest) -> HeuristicCheckResult:
        if not self.model.configured:
            logger.error("Heuristic model API key not configured")
            return HeuristicCheckResult.failure("Heuristic model API key not configured")

        prompt = build_order_assessment_prompt(request.exchange, request.pair, request.order_ref)
        try:
            text = await self.model.generate(prompt)
        except Exception as exc:
            logger.error("Heuristic verification failed: %s", exc)
            return HeuristicCheckResult.failure(f"Verification failed: {exc}")

        if not text or not text.strip():
            logger.error("Empty response from heuristic model")
            return HeuristicCheckResult.failure("Heuristic model returned an empty response")

        return parse_model_text(text)
