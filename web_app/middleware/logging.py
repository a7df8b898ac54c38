"""Request logging middleware."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from yaus.common.logging_config import get_logger

QUIET_PATHS = ("/api/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request: method, path, status, duration.

    Server errors are logged as warnings; health checks only at DEBUG.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("yaus.web")

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        if response.status_code >= 500:
            level = logging.WARNING
        elif path in QUIET_PATHS:
            level = logging.DEBUG
        else:
            level = logging.INFO

        message = f"{request.method} {path} -> {response.status_code} ({duration_ms}ms) from {client_ip}"
        if response.status_code in (301, 302, 307, 308):
            message += f" to {response.headers.get('location')}"

        self.logger.log(
            level,
            message,
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
