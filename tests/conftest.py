from __future__ import annotations

from datetime import datetime, timezone
from itertools import count
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from leave_api.config.settings import Settings
from leave_api.db.base import Base
from leave_api.db.init_db import seed_roles
from leave_api.db.session import build_session_factory
from leave_api.main import create_app
from leave_api.models.base.enums import Department, Gender, RoleName
from leave_api.schemas.auth import SignupRequest
from leave_api.schemas.user import UserResponse
from leave_api.services.auth import RegistrationService
from leave_api.services.common.permissions import Principal
from leave_api.services.common.security import JWTSettings, PasswordHasher
from leave_api.services.communication import EmailError
from leave_api.services.file import ImageStoreError, StoredImage

ROLE_IDS = {
    RoleName.ADMIN: "1",
    RoleName.HOD: "2",
    RoleName.STAFF: "3",
    RoleName.STUDENT: "4",
}

PASSWORD = "secret123"
JWT_SECRET = "test-secret"


class FakeMailer:
    """Records outgoing mail; addresses in ``fail_for`` raise EmailError."""

    def __init__(self, fail_for: Optional[set] = None):
        self.sent = []
        self.fail_for = set(fail_for or ())

    def send(self, message):
        if self.fail_for.intersection(message.to):
            raise EmailError(f"Failed to send email to {message.to}")
        self.sent.append(message)

    def to(self, address):
        return [m for m in self.sent if address in m.to]


class FakeImageStore:
    def __init__(self, fail_upload: bool = False):
        self.uploaded = []
        self.destroyed = []
        self.fail_upload = fail_upload
        self._ids = count(1)

    def upload(self, data, *, folder):
        if self.fail_upload:
            raise ImageStoreError("Image upload failed: boom")
        public_id = f"{folder}/img{next(self._ids)}"
        self.uploaded.append((public_id, data))
        return StoredImage(
            url=f"https://res.cloudinary.com/demo/image/upload/v1700000000/{public_id}.png",
            public_id=public_id,
        )

    def destroy(self, public_id):
        self.destroyed.append(public_id)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = build_session_factory(engine)
    seed_roles(factory)
    return factory


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_settings():
    return JWTSettings(secret_key=JWT_SECRET)


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def registration(session_factory, hasher):
    return RegistrationService(session_factory, hasher, leave_quota=30)


@pytest.fixture
def make_user(registration) -> Callable[..., UserResponse]:
    serial = count(1)

    def _make(
        role: RoleName = RoleName.STUDENT,
        department: Department = Department.CSE,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserResponse:
        n = next(serial)
        return registration.signup(
            SignupRequest(
                email=email or f"{role.value.lower()}{n}@college.edu",
                password=PASSWORD,
                name=name or f"{role.value.title()} {n}",
                gender=Gender.FEMALE,
                phone="9876543210",
                address="12 College Road",
                department=department,
                role_id=ROLE_IDS[role],
            )
        )

    return _make


def principal_for(user: UserResponse) -> Principal:
    return Principal(
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        role_id=user.role_id,
        department=user.department,
        image=user.image,
    )


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY=JWT_SECRET,
        PASSWORD_BCRYPT_ROUNDS=4,
        AUTO_CREATE_TABLES=False,
        FRONTEND_URL="http://frontend.test",
        CORS_ORIGINS="http://frontend.test",
        GOOGLE_CLIENT_ID=None,
        GOOGLE_CLIENT_SECRET=None,
        LOG_FORMAT="text",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(settings, session_factory, mailer, image_store):
    app = create_app(
        settings,
        session_factory=session_factory,
        mailer=mailer,
        image_store=image_store,
    )
    with TestClient(app) as client:
        yield client


@pytest.fixture
def login(client):
    """Log in through the API and return the session token."""

    def _login(email: str, password: str = PASSWORD) -> str:
        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        # The session cookie would win over the header on later requests
        client.cookies.clear()
        return response.json()["data"]["token"]

    return _login


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
