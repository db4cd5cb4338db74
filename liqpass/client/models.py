"""Wire shapes exchanged with the gateway and the order/claim backend."""

from typing import Any, Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class SkuOption(BaseModel):
    code: str
    label: str
    description: str | None = None
    premium: float | None = None
    payout: float | None = None
    exchange: str | None = None
    raw: Any = None


# ---------------------------------------------------------------------------
# Verification (client side)
# ---------------------------------------------------------------------------

VerificationStatus = Literal["pending", "processing", "success", "failed", "error", "warning", "invalid"]


class VerificationResultDetail(BaseModel):
    code: str
    message: str
    severity: Literal["info", "warning", "error", "success"]
    timestamp: str | None = None


class VerificationOutcome(BaseModel):
    """Gateway reply mapped onto the states the purchase flow understands."""

    status: VerificationStatus
    exchange: str | None = None
    pair: str | None = None
    orderRef: str | None = None
    eligible: bool = False
    parsed: dict[str, Any] | None = None
    diag: list[Any] | None = None
    evidenceHint: str | None = None
    refCode: str | None = None
    env: str | None = None
    errorCode: str | None = None
    errorMessage: str | None = None
    details: list[VerificationResultDetail] = []
    timestamp: str | None = None
    retryable: bool = False


# ---------------------------------------------------------------------------
# Orders / claims
# ---------------------------------------------------------------------------

class CreateOrderRequest(BaseModel):
    skuId: str
    exchange: str
    pair: str
    orderRef: str
    wallet: str
    premium: float = Field(..., ge=0)
    payout: float = Field(..., ge=0)
    paymentMethod: str


class OrderRecord(BaseModel):
    orderId: int
    status: str
    createdAt: str


class CreateClaimRequest(BaseModel):
    orderId: int
    wallet: str
    evidenceHash: str
    reason: str


class ClaimRecord(BaseModel):
    claimId: int
    status: str
    createdAt: str
