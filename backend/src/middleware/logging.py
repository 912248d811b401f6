"""Request logging middleware."""

import time
import uuid

from fastapi import Request

from src.utils.logger import clear_request_context, get_logger, set_request_id

log = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def logging_middleware(request: Request, call_next):
    """Assign a request id, log the request and echo the id in the response."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    set_request_id(request_id)

    start = time.perf_counter()
    log.info("request started", method=request.method, path=request.url.path)

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        log.exception(
            "request failed",
            method=request.method,
            path=request.url.path,
            duration_ms=duration_ms,
        )
        clear_request_context()
        raise

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    log.info(
        "request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    clear_request_context()
    return response
