"""Request logging and correlation ids.

Only request metadata is logged: method, route template, status and duration.
Bodies, query strings and headers can hold patient data and are left out.
"""

from __future__ import annotations

import logging
import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from patient_service.core.routing import route_label

logger = logging.getLogger("patient_service.http")

REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


def get_or_create_request_id(*, request: Request) -> str:
    """Propagate a well-formed incoming X-Request-ID, otherwise generate one."""

    candidate = request.headers.get(REQUEST_ID_HEADER)
    if candidate and _SAFE_REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000.0, 2)


class HttpLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one log line per request and stamp X-Request-ID on every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = get_or_create_request_id(request=request)
        started = time.perf_counter()
        # Exception handlers read this to correlate their own log lines.
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            # The traceback is logged once, by the error mapper.
            logger.info(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "http_method": request.method,
                    "request_path": route_label(request),
                    "status_code": 500,
                    "duration_ms": _elapsed_ms(started),
                },
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "http_method": request.method,
                "request_path": route_label(request),
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )
        return response
