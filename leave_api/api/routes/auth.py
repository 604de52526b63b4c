"""
Authentication routes.

Session login/logout, token verification, Google sign-in and the
password reset flow.
"""

import secrets
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from leave_api.api.deps import (
    get_auth_service,
    get_oauth_client,
    get_otp_service,
    get_registration_service,
    get_settings,
    get_token,
    require,
)
from leave_api.config.settings import Settings
from leave_api.core.constants import (
    SESSION_COOKIE_MAX_AGE_SECONDS,
    SESSION_COOKIE_NAME,
    Messages,
)
from leave_api.core.logging import get_logger
from leave_api.schemas.auth import (
    ForgetPasswordRequest,
    LoginData,
    LoginRequest,
    MatchOtpRequest,
    ResetPasswordRequest,
    TokenRequest,
    VerifyResponse,
)
from leave_api.schemas.common.response import MessageResponse, SuccessResponse
from leave_api.schemas.user import UserResponse
from leave_api.services.auth import (
    AuthService,
    GoogleOAuthClient,
    OTPService,
    RegistrationService,
)
from leave_api.services.common import errors
from leave_api.services.common.permissions import Principal

logger = get_logger(__name__)

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_MAX_AGE_SECONDS = 600

router = APIRouter(tags=["auth"])


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_COOKIE_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production(),
        samesite="strict",
    )


# --- Session -----------------------------------------------------------------

@router.post("/login", response_model=SuccessResponse[LoginData])
def login(
    data: LoginRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Check credentials, set the session cookie and return the token."""
    result = auth.login(data)
    set_session_cookie(response, result.token, settings)
    return SuccessResponse.create(Messages.LOGIN_SUCCESSFUL, result)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="strict")
    return MessageResponse(message=Messages.LOGOUT_SUCCESSFUL)


@router.post("/verify", response_model=VerifyResponse)
@router.post("/me", response_model=VerifyResponse)
def verify(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    request_token: Annotated[Optional[str], Depends(get_token)],
    payload: Annotated[Optional[TokenRequest], Body()] = None,
):
    """Verify a token from the body, cookie or header and return its claims."""
    token = (payload.token if payload else None) or request_token
    return VerifyResponse(authenticated=True, user=auth.verify(token))


@router.get("/whoami", response_model=SuccessResponse[UserResponse])
def whoami(
    principal: Annotated[Principal, Depends(require("profile.read"))],
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    return SuccessResponse.create("User retrieved successfully", auth.whoami(principal))


# --- Google sign-in ----------------------------------------------------------

def _require_oauth(client: Optional[GoogleOAuthClient]) -> GoogleOAuthClient:
    if client is None:
        raise errors.NotFoundError("OAuthProvider", "google", message="Google sign-in is not configured")
    return client


@router.get("/auth/google")
def google_login(
    client: Annotated[Optional[GoogleOAuthClient], Depends(get_oauth_client)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    url, state = _require_oauth(client).authorization_url()
    response = RedirectResponse(url, status_code=status.HTTP_302_FOUND)
    # Lax, so the cookie survives the top-level redirect back from Google
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production(),
        samesite="lax",
    )
    return response


@router.get("/auth/google/callback")
async def google_callback(
    request: Request,
    client: Annotated[Optional[GoogleOAuthClient], Depends(get_oauth_client)],
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    request_state: Annotated[Optional[str], Query(alias="state")] = None,
    code: Annotated[Optional[str], Query()] = None,
):
    """
    Finish Google sign-in.

    Redirects to the dashboard with a session cookie, or to the login
    page when anything goes wrong.
    """
    client = _require_oauth(client)
    oauth_state = request.cookies.get(OAUTH_STATE_COOKIE)
    login_url = f"{settings.FRONTEND_URL}/login"

    if not code or not request_state or not oauth_state or not secrets.compare_digest(
        request_state, oauth_state
    ):
        logger.warning("oauth_state_mismatch")
        response = RedirectResponse(login_url, status_code=status.HTTP_302_FOUND)
        response.delete_cookie(OAUTH_STATE_COOKIE)
        return response

    try:
        profile = await client.fetch_profile(code)
        user = await run_in_threadpool(
            registration.find_or_provision_oauth_user,
            email=profile.email,
            name=profile.name,
            image=profile.picture,
        )
    except errors.ServiceError as exc:
        logger.warning("oauth_sign_in_failed", error=exc.message)
        response = RedirectResponse(login_url, status_code=status.HTTP_302_FOUND)
        response.delete_cookie(OAUTH_STATE_COOKIE)
        return response

    session = auth.issue_token(user)
    response = RedirectResponse(f"{settings.FRONTEND_URL}/dashboard", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(OAUTH_STATE_COOKIE)
    set_session_cookie(response, session.token, settings)
    logger.info("oauth_sign_in", user_id=user.id)
    return response


# --- Password reset ----------------------------------------------------------

@router.post("/forgetPassword", response_model=MessageResponse)
def forget_password(
    data: ForgetPasswordRequest,
    otp: Annotated[OTPService, Depends(get_otp_service)],
):
    otp.issue(data)
    return MessageResponse(message=Messages.OTP_SENT)


@router.post("/match-otp", response_model=MessageResponse)
def match_otp(
    data: MatchOtpRequest,
    otp: Annotated[OTPService, Depends(get_otp_service)],
):
    otp.match(data)
    return MessageResponse(message=Messages.OTP_MATCHED)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    data: ResetPasswordRequest,
    otp: Annotated[OTPService, Depends(get_otp_service)],
):
    otp.reset_password(data)
    return MessageResponse(message=Messages.PASSWORD_UPDATED)
