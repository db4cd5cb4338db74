"""Order verification endpoint."""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from liqpass.api.models import VerifyOrderRequest
from liqpass.verification.dispatcher import VerificationDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


def get_dispatcher(request: Request) -> VerificationDispatcher:
    return request.app.state.dispatcher


async def _read_json(request: Request):
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Unparseable JSON body on %s", request.url.path)
        return None


@router.post(
    "/verify/order",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": VerifyOrderRequest.model_json_schema()}},
            "required": True,
        }
    },
)
async def verify_order(request: Request):
    """Confirm that an exchange order is genuine (stub mode always succeeds)."""
    payload = await _read_json(request)
    result = await get_dispatcher(request).dispatch(payload)
    return JSONResponse(status_code=result.status_code, content=result.body)
