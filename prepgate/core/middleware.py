"""HTTP middleware for request correlation and access logging.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from prepgate.core.config import settings
from prepgate.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


def _was_throttled(request: Request, status_code: int) -> bool:
    return bool(getattr(request.state, "rate_limited", False)) or status_code == 429


async def request_id_middleware(request: Request, call_next) -> Response:
    """Correlate, time and log one request.

    The id comes from the ``LOG_REQUEST_ID_HEADER`` header when the caller
    sends one, otherwise a UUID4 is minted. It is bound to the logging
    context for the duration of the request and echoed on the response
    together with ``X-Request-Duration-ms``.

    Every request ends with one ``request.completed`` record carrying the
    admission decision (``throttled``), so rejected clients show up in the
    access log next to the latency of the requests that got through.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception:
        logger.exception(
            "request.failed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        clear_request_id()
        raise

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    throttled = _was_throttled(request, response.status_code)
    logger.log(
        logging.WARNING if throttled else logging.INFO,
        "request.completed",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "throttled": throttled,
        },
    )
    clear_request_id()

    response.headers[header_name] = request_id
    response.headers["X-Request-Duration-ms"] = f"{duration_ms:.2f}"
    return response
