"""Request logging middleware."""

import logging
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request and its response with a per-request id.

    The id is kept on request.state.request_id and echoed back in the
    X-Request-ID response header.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shorturl_service.requests")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else "unknown"
        self.logger.info(
            "[%s] Request: %s %s from %s", request_id, request.method, request.url.path, client_ip
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            "[%s] Response: %s %s - Status: %d - Duration: %.2fms",
            request_id, request.method, request.url.path, response.status_code, duration_ms
        )
        response.headers["X-Request-ID"] = request_id
        return response
