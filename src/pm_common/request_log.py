"""Request logging middleware.

Every request gets a short id (reused from an inbound X-Request-ID header when
the caller supplies one). The id lands in request.state for ApiResponse and is
echoed back on the response so clients can correlate with server logs.

Log format:
    INFO [GET] /api/v1/analytics/liquidity → 200 (412ms) req=req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pm.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        inbound = request.headers.get(REQUEST_ID_HEADER, "").strip()
        request_id = inbound[:64] if inbound else f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "[%s] %s → unhandled (%.0fms) req=%s",
                request.method, request.url.path, elapsed_ms, request_id,
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000

        # Upstream-bound endpoints are slow by nature; flag outliers only
        level = logging.WARNING if elapsed_ms > 10_000 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) req=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
