import pytest

from leave_api.models.base.enums import AuthProvider, Department, Gender, RoleName
from leave_api.repositories.leave import LeaveBalanceRepository
from leave_api.schemas.auth import LoginRequest, SignupRequest, StudentRegisterRequest
from leave_api.services.auth import AuthService, default_avatar
from leave_api.services.common import UnitOfWork
from leave_api.services.common.errors import (
    AlreadyExistsError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from leave_api.services.common.security import JWTSettings, create_access_token

from conftest import PASSWORD, principal_for


@pytest.fixture
def auth(session_factory, jwt_settings, hasher):
    return AuthService(session_factory, jwt_settings, hasher)


def _student_form(**overrides):
    data = dict(
        email="ravi@college.edu",
        password=PASSWORD,
        name="Ravi",
        gender=Gender.MALE,
        phone="9000000001",
        address="Hostel B",
        department=Department.MECH,
    )
    data.update(overrides)
    return data


def _balances_for(session_factory, user_id):
    with UnitOfWork(session_factory) as uow:
        return uow.get_repo(LeaveBalanceRepository).count({"user_id": user_id})


def test_registration_creates_student_with_one_full_balance(registration, session_factory):
    user = registration.register_student(StudentRegisterRequest(**_student_form()))

    assert user.role == RoleName.STUDENT
    assert user.role_id == "4"
    assert user.provider == AuthProvider.CREDENTIALS
    assert user.image == default_avatar("Ravi")
    assert _balances_for(session_factory, user.id) == 1

    with UnitOfWork(session_factory) as uow:
        balance = uow.get_repo(LeaveBalanceRepository).get_by_user(user.id)
        assert balance.total == 30
        assert balance.available == 30
        assert balance.used == 0


def test_duplicate_email_is_rejected(registration):
    registration.register_student(StudentRegisterRequest(**_student_form()))
    with pytest.raises(AlreadyExistsError):
        registration.register_student(StudentRegisterRequest(**_student_form(name="Other")))


def test_signup_with_unknown_role(registration):
    with pytest.raises(ValidationError):
        registration.signup(SignupRequest(**_student_form(), role_id="9"))


def test_signup_assigns_requested_role(registration):
    user = registration.signup(SignupRequest(**_student_form(), role_id="2"))
    assert user.role == RoleName.HOD


def test_default_avatar_uses_initial():
    assert default_avatar("priya") == "https://avatar.vercel.sh/P"


def test_ensure_admin_is_idempotent(registration):
    assert registration.ensure_admin("root@college.edu", PASSWORD) is True
    assert registration.ensure_admin("root@college.edu", PASSWORD) is False


def test_oauth_user_is_provisioned_once(registration, session_factory):
    first = registration.find_or_provision_oauth_user(
        email="g@gmail.com", name="Gita", image="https://lh3.googleusercontent.com/a"
    )
    again = registration.find_or_provision_oauth_user(email="g@gmail.com", name="Gita")

    assert first.id == again.id
    assert first.provider == AuthProvider.GOOGLE
    assert first.department == Department.CSE
    assert first.password is None
    assert _balances_for(session_factory, first.id) == 1


def test_login_issues_verifiable_token(auth, make_user):
    staff = make_user(RoleName.STAFF, Department.IT)

    session = auth.login(LoginRequest(email=staff.email, password=PASSWORD))
    claims = auth.verify(session.token)

    assert claims.id == staff.id
    assert claims.role == RoleName.STAFF
    assert claims.role_id == "3"
    assert claims.name == staff.name


def test_login_failures(auth, make_user, registration):
    staff = make_user(RoleName.STAFF, Department.IT)
    google = registration.find_or_provision_oauth_user(email="g@gmail.com", name="Gita")

    with pytest.raises(NotFoundError):
        auth.login(LoginRequest(email="ghost@college.edu", password=PASSWORD))
    with pytest.raises(AuthenticationError):
        auth.login(LoginRequest(email=staff.email, password="wrong-password"))
    with pytest.raises(AuthenticationError):
        auth.login(LoginRequest(email=google.email, password=PASSWORD))


def test_verify_rejects_missing_and_forged_tokens(auth):
    with pytest.raises(AuthenticationError):
        auth.verify(None)
    forged = create_access_token(
        claims={"id": "x", "email": "x@y.z", "role": "ADMIN", "roleId": "1", "name": "X"},
        jwt_settings=JWTSettings(secret_key="another-secret"),
    )
    with pytest.raises(AuthenticationError):
        auth.verify(forged)


def test_whoami_reads_stored_profile(auth, make_user):
    hod = make_user(RoleName.HOD, Department.EEE)
    profile = auth.whoami(principal_for(hod))
    assert profile.email == hod.email
    assert profile.department == Department.EEE
