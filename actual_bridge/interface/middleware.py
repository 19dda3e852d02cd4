"""Mini README: HTTP middleware shared by every route.

Structure:
    * SecurityHeadersMiddleware - conservative response headers.
    * AccessLogMiddleware - one log line per request in ``dev`` or
      ``combined`` (Apache) format.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..logging_utils import get_logger

ACCESS_LOGGER = get_logger("actual_bridge.access")

_SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'self'; object-src 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for header, value in _SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log each request once the response headers are known."""

    def __init__(self, app, log_format: str = "combined") -> None:
        super().__init__(app)
        if log_format not in {"dev", "combined"}:
            raise ValueError(f"Unsupported access log format: {log_format}")
        self.log_format = log_format

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        length = response.headers.get("content-length", "-")
        if self.log_format == "dev":
            ACCESS_LOGGER.info(
                "%s %s %s %.3f ms - %s",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                length,
            )
        else:
            target = request.url.path
            if request.url.query:
                target = f"{target}?{request.url.query}"
            ACCESS_LOGGER.info(
                '%s - - [%s] "%s %s HTTP/%s" %s %s "%s" "%s"',
                request.client.host if request.client else "-",
                datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S +0000"),
                request.method,
                target,
                request.scope.get("http_version", "1.1"),
                response.status_code,
                length,
                request.headers.get("referer", "-"),
                request.headers.get("user-agent", "-"),
            )
        return response
