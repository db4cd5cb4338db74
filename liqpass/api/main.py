"""LiqPass verification gateway FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from liqpass.api.middleware import request_logging_middleware
from liqpass.api.models import NotFoundResponse
from liqpass.config import LiqPassConfig, get_config
from liqpass.verification.dispatcher import VerificationDispatcher
from liqpass.verification.registry import CheckerRegistry, build_default_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler."""
    config: LiqPassConfig = app.state.config

    if config.verify_mode == "real":
        if not config.okx_configured:
            logger.warning("OKX credentials are not set - OKX orders will not verify")
        if not config.binance_configured:
            logger.warning("Binance credentials are not set - Binance orders will not verify")
        if not config.google_mcp_configured:
            logger.warning("GOOGLE_MCP_API_KEY is not set - heuristic checks will fail closed")

    logger.info("LiqPass gateway starting - port=%d mode=%s", config.port, config.verify_mode)
    yield
    logger.info("LiqPass gateway shutdown")


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes (and wrong methods) get the gateway's ``not_found`` envelope."""
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content=NotFoundResponse(path=request.url.path).model_dump())
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


def create_app(
    config: LiqPassConfig | None = None,
    registry: CheckerRegistry | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""
    config = config or get_config()
    registry = registry or build_default_registry(config)

    app = FastAPI(
        title="LiqPass Verification Gateway",
        description="Exchange order verification for leverage-liquidation insurance purchases",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.dispatcher = VerificationDispatcher(config, registry)

    # CORS - every origin, short preflight cache
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Idempotency-Key"],
        max_age=600,
    )

    # Request logging and X-Request-ID middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_logging_middleware)

    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    from liqpass.api.routes.health import router as health_router
    from liqpass.api.routes.verify import router as verify_router

    app.include_router(health_router)
    app.include_router(verify_router)

    return app


app = create_app()
