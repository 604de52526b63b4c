# leave_api/core/exception_handlers.py
"""
Exception handlers translating service errors into HTTP responses.

Every error response uses the ``{"error": ..., "details": ...}`` envelope.
Unexpected failures are logged with their traceback and reported to the
client only as a generic message.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from leave_api.core.constants import Messages
from leave_api.core.logging import get_logger
from leave_api.core.middleware import get_request_id
from leave_api.services.common import errors
from leave_api.services.common.permissions import PermissionDenied

logger = get_logger(__name__)

# Most specific classes first
STATUS_BY_ERROR = (
    (errors.ValidationError, status.HTTP_400_BAD_REQUEST),
    (errors.AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (errors.AuthorizationError, status.HTTP_403_FORBIDDEN),
    (errors.NotFoundError, status.HTTP_404_NOT_FOUND),
    (errors.ConflictError, status.HTTP_409_CONFLICT),
)


def error_body(message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    return {"error": message, "details": jsonable_encoder(details) if details else None}


def status_for(exc: errors.ServiceError) -> int:
    for error_cls, code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]


async def service_error_handler(request: Request, exc: errors.ServiceError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error(
            "service_error",
            request_id=get_request_id(request),
            path=request.url.path,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(status_code=code, content=error_body(Messages.INTERNAL_SERVER_ERROR))

    details = dict(exc.details)
    field = getattr(exc, "field", None)
    if field and "field" not in details:
        details["field"] = field
    return JSONResponse(status_code=code, content=error_body(exc.message, details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(Messages.INVALID_INPUT, _validation_details(exc)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        request_id=get_request_id(request),
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(Messages.INTERNAL_SERVER_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(errors.ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "error_body",
    "register_exception_handlers",
    "status_for",
]
