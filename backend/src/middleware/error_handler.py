"""Exception handlers rendering every failure as an ``ErrorResponse`` envelope."""

import traceback
from datetime import datetime, timezone
from typing import Any, Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.exceptions import BaseAPIException, DatabaseError
from src.schemas.errors import ErrorDetail, ErrorResponse
from src.utils.logger import get_logger, get_request_id

log = get_logger(__name__)


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        request_id=get_request_id(),
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _field_errors(exc: Union[RequestValidationError, PydanticValidationError]) -> list[dict]:
    """
    Flatten pydantic errors to ``{field, message, type}``.

    The ``body`` prefix FastAPI adds to request locations is dropped so a bad
    date range reads as ``filters.date_range``.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        errors.append(
            {
                "field": ".".join(loc),
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
            }
        )
    return errors


async def base_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    log_event = log.error if exc.status_code >= 500 else log.warning
    log_event(
        "api exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        path=request.url.path,
    )
    return _error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """Malformed request bodies and filter shapes are 422."""
    errors = _field_errors(exc)
    log.warning("request validation failed", path=request.url.path, errors=errors)
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.error(
        "database error",
        path=request.url.path,
        error=str(exc),
        traceback=traceback.format_exc(),
    )
    db_error = DatabaseError()
    return _error_response(db_error.status_code, db_error.error_code, db_error.message)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.critical(
        "unhandled exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        traceback=traceback.format_exc(),
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


_HANDLERS = (
    (BaseAPIException, base_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (PydanticValidationError, validation_exception_handler),
    (SQLAlchemyError, sqlalchemy_exception_handler),
    (Exception, generic_exception_handler),
)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]
    log.info("exception handlers registered", count=len(_HANDLERS))
