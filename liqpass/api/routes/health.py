"""Health check endpoint."""

from fastapi import APIRouter, Request

from liqpass.api.models import HealthResponse
from liqpass.config import LiqPassConfig
from liqpass.utils import utc_now_iso

router = APIRouter(tags=["health"])


def health_snapshot(config: LiqPassConfig) -> HealthResponse:
    """Report mode, upstream endpoints and whether the heuristic key is set."""
    return HealthResponse(
        status="ok",
        verify_mode=config.verify_mode,
        okx_base_url=config.okx_base_url,
        binance_base_url=config.binance_base_url,
        google_mcp_base_url=config.google_mcp_base_url,
        google_mcp_configured=config.google_mcp_configured,
        timestamp=utc_now_iso(),
    )


@router.get("/healthz", response_model=HealthResponse, response_model_by_alias=True)
def healthz(request: Request):
    return health_snapshot(request.app.state.config)
