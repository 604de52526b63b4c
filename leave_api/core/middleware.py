# leave_api/core/middleware.py
"""
Core middleware registration for the FastAPI application.

This module provides middleware components for request tracking,
timing, security headers and error logging.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from leave_api.core.constants import HEADER_REQUEST_ID
from leave_api.core.logging import get_logger, request_id as request_id_var

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each incoming request.

    The request ID is:
    - Taken from the incoming header when an upstream proxy set one
    - Stored in request.state.request_id and the logging context
    - Added to response headers as X-Request-ID
    """

    def __init__(self, app: ASGIApp, header_name: str = HEADER_REQUEST_ID):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that measures and logs request processing time.

    Adds X-Process-Time header to responses with the duration in seconds.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        logger.info(
            "request_completed",
            request_id=getattr(request.state, "request_id", None),
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=round(process_time, 4),
            client_host=request.client.host if request.client else None,
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds common security headers to all responses."""

    def __init__(self, app: ASGIApp, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs error responses and exceptions that escape the handlers."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                request_id=getattr(request.state, "request_id", None),
                method=request.method,
                path=request.url.path,
                error_type=type(exc).__name__,
                exc_info=True,
            )
            raise

        if response.status_code >= 500:
            logger.warning(
                "request_error_status",
                request_id=getattr(request.state, "request_id", None),
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
        return response


def register_middlewares(app: FastAPI, *, production: bool = False) -> None:
    """
    Register the core middlewares.

    The last middleware added is the outermost one, so the request ID is
    assigned before timing and error logging run.
    """
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, hsts=production)
    app.add_middleware(RequestIDMiddleware)

    logger.debug("middlewares_registered", production=production)


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


__all__ = [
    "RequestIDMiddleware",
    "TimingMiddleware",
    "SecurityHeadersMiddleware",
    "ErrorLoggingMiddleware",
    "register_middlewares",
    "get_request_id",
]
