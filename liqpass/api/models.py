"""Pydantic request/response models for the verification gateway."""

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    verify_mode: str = Field(alias="verifyMode")
    okx_base_url: str = Field(alias="okxBaseUrl")
    binance_base_url: str = Field(alias="binanceBaseUrl")
    google_mcp_base_url: str = Field(alias="googleMCPBaseUrl")
    google_mcp_configured: bool = Field(alias="googleMCPConfigured")
    timestamp: str


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

class VerifyOrderRequest(BaseModel):
    """Documented body for ``POST /verify/order``.

    The route reads the raw JSON itself so that missing fields yield the
    gateway's own 400 envelope instead of a 422.
    """

    exchange: str = Field(..., examples=["okx"])
    pair: str = Field(..., examples=["BTC-USDT"])
    orderRef: str = Field(..., examples=["client-order-123"])
    wallet: str = Field(..., examples=["0xabc..."])


class NotFoundResponse(BaseModel):
    status: str = "not_found"
    path: str
