"""
HTTP request logging middleware.

Tags each request with an id, times it, and logs one structured line per
request. Health probes are logged at debug so they do not drown out swaps.
"""

import time
import uuid
from typing import Iterable, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = structlog.stdlib.get_logger("swapdesk.http")

REQUEST_ID_HEADER = "x-request-id"
QUIET_PATHS = ("/healthz",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests with request id, timing and status."""

    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(QUIET_PATHS if quiet_paths is None else quiet_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        # Every log line emitted while handling this request carries the id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            self._log(request, status_code, round((time.perf_counter() - start) * 1000, 1))

    def _log(self, request: Request, status_code: int, duration_ms: float) -> None:
        path = request.url.path
        if status_code >= 500:
            log = logger.error
        elif status_code >= 400:
            log = logger.warning
        elif path in self.quiet_paths:
            log = logger.debug
        else:
            log = logger.info

        log(
            "http_request",
            method=request.method,
            path=path,
            status=status_code,
            duration_ms=duration_ms,
        )
