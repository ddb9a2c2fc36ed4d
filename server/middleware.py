"""HTTP middleware for request/response logging."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Slow request threshold in milliseconds
SLOW_REQUEST_THRESHOLD_MS = 1000

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"

# Polled by load balancers and dashboards; logged at DEBUG when they succeed
QUIET_PATHS = frozenset({"/health", "/chat/presence"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each chat request with the caller's address and timing.

    Log levels:
    - DEBUG: Request start, successful polls of QUIET_PATHS
    - INFO: Registrations, posted messages, stream opened
    - WARNING: 4xx errors, slow requests (>1s)
    - ERROR: 5xx errors

    An event stream outlives the handler, so it is logged once when opened,
    with the identity id it was opened for.
    """

    def __init__(self, app, quiet_paths: frozenset[str] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.quiet_paths = quiet_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        client = f"{request.client.host}:{request.client.port}" if request.client else "-"

        logger.debug("%s %s %s", client, request.method, request.url.path)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._log_response(request, response, client, duration_ms)

        return response

    def _log_response(
        self, request: Request, response: Response, client: str, duration_ms: float
    ) -> None:
        method = request.method
        path = request.url.path
        status = response.status_code

        if status >= 500:
            logger.error("%s %s %s -> %d (%.1fms)", client, method, path, status, duration_ms)
        elif status >= 400:
            logger.warning("%s %s %s -> %d (%.1fms)", client, method, path, status, duration_ms)
        elif response.headers.get("content-type", "").startswith(EVENT_STREAM_MEDIA_TYPE):
            logger.info(
                "%s %s %s -> stream opened for %s (%.1fms)",
                client,
                method,
                path,
                request.query_params.get("id", "-"),
                duration_ms,
            )
        elif duration_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(
                "%s %s %s -> %d (%.1fms) SLOW", client, method, path, status, duration_ms
            )
        elif path in self.quiet_paths:
            logger.debug("%s %s %s -> %d (%.1fms)", client, method, path, status, duration_ms)
        else:
            logger.info("%s %s %s -> %d (%.1fms)", client, method, path, status, duration_ms)
