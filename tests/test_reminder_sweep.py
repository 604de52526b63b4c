from datetime import date, timedelta

import pytest

from leave_api.models.auth.otp_code import OneTimeCode
from leave_api.models.base.enums import Department, LeaveStatus, LeaveType, RoleName
from leave_api.repositories.auth import OneTimeCodeRepository
from leave_api.schemas.leave import LeaveApplyRequest
from leave_api.services.common import UnitOfWork
from leave_api.services.communication import (
    PENDING_REMINDER_SUBJECT,
    ReminderSweep,
    render_otp,
    render_pending_reminder,
)
from leave_api.services.leave import LeaveService

from conftest import FakeMailer, principal_for

URL = "http://frontend.test"


def _apply(leaves, requester, approver):
    return leaves.apply(
        principal_for(requester),
        LeaveApplyRequest(
            requested_to=approver.id,
            start_date=date(2024, 4, 1),
            end_date=date(2024, 4, 2),
            leave_type=LeaveType.FULL_DAY,
            reason="Travelling home",
        ),
    )


@pytest.fixture
def department(make_user):
    return {
        "staff_a": make_user(RoleName.STAFF, Department.CSE, email="staff.a@college.edu"),
        "staff_b": make_user(RoleName.STAFF, Department.CSE, email="staff.b@college.edu"),
        "student": make_user(RoleName.STUDENT, Department.CSE),
    }


def test_templates_render_count_and_link():
    bodies = render_pending_reminder(3, URL)
    assert "3" in bodies["text"]
    assert URL in bodies["text"]
    assert URL in bodies["html"]
    assert "7294" in render_otp("7294")


def test_each_approver_with_pending_requests_is_reminded(session_factory, department, clock):
    leaves = LeaveService(session_factory)
    _apply(leaves, department["student"], department["staff_a"])
    _apply(leaves, department["student"], department["staff_a"])
    decided = _apply(leaves, department["student"], department["staff_b"])
    leaves.transition_status(principal_for(department["staff_b"]), decided.id, LeaveStatus.APPROVED)

    mailer = FakeMailer()
    result = ReminderSweep(session_factory, mailer, leave_management_url=URL, clock=clock).run()

    assert result.notified == 1
    assert result.failed == []
    [message] = mailer.sent
    assert message.to == ["staff.a@college.edu"]
    assert message.subject == PENDING_REMINDER_SUBJECT
    assert "2" in message.body_text


def test_one_failed_delivery_does_not_stop_the_sweep(session_factory, department, clock):
    leaves = LeaveService(session_factory)
    _apply(leaves, department["student"], department["staff_a"])
    _apply(leaves, department["student"], department["staff_b"])

    mailer = FakeMailer(fail_for={"staff.a@college.edu"})
    result = ReminderSweep(session_factory, mailer, leave_management_url=URL, clock=clock).run()

    assert result.notified == 1
    assert result.failed == ["staff.a@college.edu"]
    assert [m.to for m in mailer.sent] == [["staff.b@college.edu"]]


def test_expired_codes_are_purged(session_factory, clock):
    with UnitOfWork(session_factory) as uow:
        repo = uow.get_repo(OneTimeCodeRepository)
        repo.create(OneTimeCode(email="old@college.edu", code="1111", issued_at=clock.now - timedelta(minutes=30)))
        repo.create(OneTimeCode(email="new@college.edu", code="2222", issued_at=clock.now - timedelta(minutes=5)))

    result = ReminderSweep(
        session_factory, FakeMailer(), leave_management_url=URL, otp_validity_minutes=10, clock=clock
    ).run()

    assert result.purged == 1
    with UnitOfWork(session_factory) as uow:
        repo = uow.get_repo(OneTimeCodeRepository)
        assert repo.find("old@college.edu", "1111") is None
        assert repo.find("new@college.edu", "2222") is not None
