from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from leave_api.api import api_router
from leave_api.config.settings import Settings, get_settings
from leave_api.core.exception_handlers import register_exception_handlers
from leave_api.core.logging import get_logger, setup_logging
from leave_api.core.middleware import register_middlewares
from leave_api.db.init_db import init_db
from leave_api.db.session import build_engine, build_session_factory
from leave_api.services.auth import (
    AuthService,
    GoogleOAuthClient,
    OTPService,
    RegistrationService,
)
from leave_api.services.common.permissions import AccessGuard
from leave_api.services.common.security import JWTSettings, PasswordHasher
from leave_api.services.communication import EmailConfig, Mailer, SMTPMailer
from leave_api.services.content import BlogService
from leave_api.services.file import CloudinaryImageStore, ImageStore, ProfileImageService
from leave_api.services.leave import LeaveService
from leave_api.services.users import UserService

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    session_factory: Optional[sessionmaker] = None,
    mailer: Optional[Mailer] = None,
    image_store: Optional[ImageStore] = None,
    oauth_client: Optional[GoogleOAuthClient] = None,
) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Builds the engine, services and access guard from ``settings`` and
      keeps them on ``app.state``.
    - Registers CORS, core middleware and exception handlers.
    - Creates tables and seeds roles (and an optional admin) on startup.

    Collaborators that talk to the outside world may be passed in, which
    is how tests run without SMTP, Cloudinary or Google.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.ENVIRONMENT)

    if session_factory is None:
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)
    else:
        engine = session_factory.kw.get("bind")

    jwt_settings = JWTSettings(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    hasher = PasswordHasher(rounds=settings.PASSWORD_BCRYPT_ROUNDS)
    mailer = mailer or SMTPMailer(EmailConfig.from_settings(settings))
    image_store = image_store or CloudinaryImageStore(settings)
    if oauth_client is None:
        oauth_client = GoogleOAuthClient.from_settings(settings)

    registration = RegistrationService(
        session_factory,
        hasher,
        leave_quota=settings.DEFAULT_LEAVE_QUOTA,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is not None:
            init_db(
                engine,
                session_factory,
                create=settings.AUTO_CREATE_TABLES,
                registration=registration,
                admin_email=settings.ADMIN_EMAIL,
                admin_password=settings.ADMIN_PASSWORD,
            )
        logger.info("application_started", environment=settings.ENVIRONMENT)
        yield
        logger.info("application_stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.access_guard = AccessGuard(jwt_settings, session_factory)
    app.state.oauth_client = oauth_client
    app.state.auth_service = AuthService(session_factory, jwt_settings, hasher)
    app.state.registration_service = registration
    app.state.otp_service = OTPService(
        session_factory,
        mailer,
        hasher,
        validity_minutes=settings.OTP_VALIDITY_MINUTES,
    )
    app.state.user_service = UserService(session_factory)
    app.state.leave_service = LeaveService(session_factory)
    app.state.blog_service = BlogService(session_factory)
    app.state.image_service = ProfileImageService(
        session_factory,
        image_store,
        max_size=settings.MAX_UPLOAD_SIZE,
        folder=settings.PROFILE_IMAGE_FOLDER,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app, production=settings.is_production())
    register_exception_handlers(app)

    app.include_router(api_router)
    return app
