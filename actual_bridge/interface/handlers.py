"""Mini README: Error translation for the HTTP surface.

Structure:
    * upstream_errors - async context manager wrapping client failures.
    * register_exception_handlers - install JSON renderers on the app.

Routes wrap their client calls in ``upstream_errors`` with a message that
names the endpoint. Known ``BridgeError`` subclasses pass through untouched
so their own status code and hint survive; anything else becomes an
``UpstreamError`` chained to the original exception.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import BridgeError, UpstreamError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@asynccontextmanager
async def upstream_errors(message: str) -> AsyncIterator[None]:
    try:
        yield
    except BridgeError:
        raise
    except Exception as error:
        raise UpstreamError(message) from error


async def _handle_bridge_error(request: Request, exc: BridgeError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
        )
    else:
        LOGGER.info(
            "%s %s rejected with %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(exc.as_payload(), status_code=exc.status_code)


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BridgeError, _handle_bridge_error)
    app.add_exception_handler(Exception, _handle_unexpected)
