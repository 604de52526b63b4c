# leave_api/api/deps.py
"""
FastAPI dependencies.

Everything a route needs is built once by the application factory and
kept on ``app.state``; these helpers fetch it for the current request.
"""

from typing import Annotated, Callable, Generator, Optional

from fastapi import Depends, Header, Query, Request
from sqlalchemy.orm import Session

from leave_api.config.settings import Settings
from leave_api.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    HEADER_TOKEN,
    SESSION_COOKIE_NAME,
)
from leave_api.db.session import session_scope
from leave_api.schemas.common.pagination import PaginationParams
from leave_api.services.auth import AuthService, GoogleOAuthClient, OTPService, RegistrationService
from leave_api.services.common.pagination import build_page_params
from leave_api.services.common.permissions import AccessGuard, Principal
from leave_api.services.content import BlogService
from leave_api.services.file import ProfileImageService
from leave_api.services.leave import LeaveService
from leave_api.services.users import UserService


# --- Application state -------------------------------------------------------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    yield from session_scope(request.app.state.session_factory)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_registration_service(request: Request) -> RegistrationService:
    return request.app.state.registration_service


def get_otp_service(request: Request) -> OTPService:
    return request.app.state.otp_service


def get_oauth_client(request: Request) -> Optional[GoogleOAuthClient]:
    return request.app.state.oauth_client


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_leave_service(request: Request) -> LeaveService:
    return request.app.state.leave_service


def get_blog_service(request: Request) -> BlogService:
    return request.app.state.blog_service


def get_image_service(request: Request) -> ProfileImageService:
    return request.app.state.image_service


# --- Authentication ------------------------------------------------------------

def get_token(
    request: Request,
    token: Annotated[Optional[str], Header(alias=HEADER_TOKEN)] = None,
    authorization: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """
    Session token from the ``token`` cookie, the ``token`` header or a
    ``Bearer`` authorization header, in that order.
    """
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if cookie:
        return cookie
    if token:
        return token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def require(capability: str) -> Callable[..., Principal]:
    """
    Dependency factory resolving the caller and enforcing ``capability``.

    Example:
        >>> @router.get("/chart")
        ... def chart(principal: Annotated[Principal, Depends(require("leave.chart"))]): ...
    """

    def dependency(
        request: Request,
        token: Annotated[Optional[str], Depends(get_token)],
    ) -> Principal:
        guard: AccessGuard = request.app.state.access_guard
        return guard.check(token, capability)

    return dependency


# --- Query parameters ----------------------------------------------------------

def page_params(
    page: Annotated[int, Query()] = DEFAULT_PAGE,
    limit: Annotated[int, Query()] = DEFAULT_PAGE_SIZE,
) -> PaginationParams:
    return build_page_params(page, limit)


PageParams = Annotated[PaginationParams, Depends(page_params)]
