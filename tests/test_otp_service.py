from datetime import timedelta

import pytest

from leave_api.models.base.enums import Department, RoleName
from leave_api.repositories.auth import OneTimeCodeRepository
from leave_api.schemas.auth import (
    ForgetPasswordRequest,
    LoginRequest,
    MatchOtpRequest,
    ResetPasswordRequest,
)
from leave_api.services.auth import AuthService, OTPService, generate_code
from leave_api.services.common import UnitOfWork
from leave_api.services.common.errors import NotFoundError, ValidationError
from leave_api.services.communication import EmailError

from conftest import FakeMailer


@pytest.fixture
def codes():
    return iter(["1234", "5678", "9012"])


@pytest.fixture
def otp(session_factory, mailer, hasher, clock, codes):
    return OTPService(
        session_factory,
        mailer,
        hasher,
        validity_minutes=10,
        clock=clock,
        code_factory=lambda: next(codes),
    )


@pytest.fixture
def student(make_user):
    return make_user(RoleName.STUDENT, Department.CSE, email="asha@college.edu")


def test_generated_codes_are_four_digits():
    for _ in range(50):
        code = generate_code()
        assert len(code) == 4
        assert 1000 <= int(code) <= 9999


def test_issue_emails_the_code(otp, mailer, student):
    otp.issue(ForgetPasswordRequest(email=student.email))

    [message] = mailer.to(student.email)
    assert "1234" in message.body_text


def test_issue_for_unknown_email(otp, mailer):
    with pytest.raises(NotFoundError):
        otp.issue(ForgetPasswordRequest(email="nobody@college.edu"))
    assert mailer.sent == []


def test_code_valid_until_the_window_closes(otp, clock, student):
    otp.issue(ForgetPasswordRequest(email=student.email))

    clock.now += timedelta(minutes=9, seconds=59)
    otp.match(MatchOtpRequest(email=student.email, otp="1234"))

    clock.now += timedelta(seconds=62)
    with pytest.raises(ValidationError):
        otp.match(MatchOtpRequest(email=student.email, otp="1234"))


def test_wrong_code_is_invalid(otp, student):
    otp.issue(ForgetPasswordRequest(email=student.email))
    with pytest.raises(NotFoundError):
        otp.match(MatchOtpRequest(email=student.email, otp="0000"))


def test_reissue_invalidates_previous_code(otp, student):
    otp.issue(ForgetPasswordRequest(email=student.email))
    otp.issue(ForgetPasswordRequest(email=student.email))

    with pytest.raises(NotFoundError):
        otp.match(MatchOtpRequest(email=student.email, otp="1234"))
    otp.match(MatchOtpRequest(email=student.email, otp="5678"))


def test_reset_changes_password_and_consumes_code(
    otp, student, session_factory, jwt_settings, hasher
):
    otp.issue(ForgetPasswordRequest(email=student.email))
    otp.reset_password(
        ResetPasswordRequest(email=student.email, otp="1234", password="brand-new-pass")
    )

    auth = AuthService(session_factory, jwt_settings, hasher)
    session = auth.login(LoginRequest(email=student.email, password="brand-new-pass"))
    assert session.user.id == student.id

    with pytest.raises(NotFoundError):
        otp.match(MatchOtpRequest(email=student.email, otp="1234"))


def test_undeliverable_code_is_not_stored(session_factory, hasher, clock, student):
    failing = OTPService(
        session_factory,
        FakeMailer(fail_for={student.email}),
        hasher,
        clock=clock,
        code_factory=lambda: "4321",
    )

    with pytest.raises(EmailError):
        failing.issue(ForgetPasswordRequest(email=student.email))
    with pytest.raises(NotFoundError):
        failing.match(MatchOtpRequest(email=student.email, otp="4321"))


def test_reissue_with_other_capitalisation_replaces_code(otp, mailer, student, session_factory):
    otp.issue(ForgetPasswordRequest(email="Asha@college.edu"))
    otp.issue(ForgetPasswordRequest(email="asha@college.edu"))

    with UnitOfWork(session_factory) as uow:
        assert uow.get_repo(OneTimeCodeRepository).count() == 1
    with pytest.raises(NotFoundError):
        otp.match(MatchOtpRequest(email="asha@college.edu", otp="1234"))
    assert [m.to for m in mailer.sent] == [[student.email], [student.email]]


def test_reset_ignores_email_capitalisation(otp, student, session_factory, jwt_settings, hasher):
    otp.issue(ForgetPasswordRequest(email=student.email))
    otp.match(MatchOtpRequest(email="ASHA@college.edu", otp="1234"))
    otp.reset_password(
        ResetPasswordRequest(email="Asha@College.edu", otp="1234", password="brand-new-pass")
    )

    auth = AuthService(session_factory, jwt_settings, hasher)
    assert auth.login(LoginRequest(email=student.email, password="brand-new-pass")).user.id == student.id
