"""Request tracing middleware.

Adds an ``X-Request-ID`` response header and logs every request with timing
and a hashed client IP.
"""

import logging
import time
import uuid

from fastapi import Request, Response

from liqpass.utils import hash_ip

logger = logging.getLogger(__name__)


async def request_logging_middleware(request: Request, call_next):
    """Add X-Request-ID header and log every request with timing."""
    request_id = str(uuid.uuid4())
    start = time.monotonic()

    response: Response = await call_next(request)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    response.headers["X-Request-ID"] = request_id

    logger.info(
        "request_id=%s ip=%s method=%s path=%s status=%d duration_ms=%d",
        request_id,
        hash_ip(request.client.host if request.client else None),
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
