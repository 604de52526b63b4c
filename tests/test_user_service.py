from datetime import date

import pytest

from leave_api.models.base.enums import Department, Gender, LeaveStatus, LeaveType, RoleName
from leave_api.schemas.common.pagination import PaginationParams
from leave_api.schemas.leave import LeaveApplyRequest
from leave_api.schemas.user import ProfileUpdateRequest, UserUpdateRequest
from leave_api.services.common.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from leave_api.services.leave import LeaveService
from leave_api.services.users import UserService

from conftest import principal_for

PAGE = PaginationParams(page=1, limit=10)


@pytest.fixture
def users(session_factory):
    return UserService(session_factory)


def test_admin_update_changes_role_and_fields(users, make_user):
    staff = make_user(RoleName.STAFF, Department.IT)

    updated = users.update_user(staff.id, UserUpdateRequest(role_id="2", phone="9111111111"))

    assert updated.role == RoleName.HOD
    assert updated.role_id == "2"
    assert updated.phone == "9111111111"
    assert updated.name == staff.name


def test_update_rejects_taken_email_and_unknown_role(users, make_user):
    first = make_user(RoleName.STAFF)
    second = make_user(RoleName.STAFF)

    with pytest.raises(AlreadyExistsError):
        users.update_user(second.id, UserUpdateRequest(email=first.email))
    with pytest.raises(ValidationError):
        users.update_user(second.id, UserUpdateRequest(role_id="7"))
    with pytest.raises(NotFoundError):
        users.update_user("missing", UserUpdateRequest(name="X"))


def test_explicit_nulls_leave_fields_untouched(users, make_user):
    student = make_user(RoleName.STUDENT)
    updated = users.update_user(student.id, UserUpdateRequest(name=None, address="New block"))
    assert updated.name == student.name
    assert updated.address == "New block"


def test_delete_removes_user(users, make_user):
    student = make_user(RoleName.STUDENT)
    users.delete_user(student.id)
    with pytest.raises(NotFoundError):
        users.delete_user(student.id)


def test_approver_with_addressed_requests_cannot_be_deleted(users, make_user, session_factory):
    admin = make_user(RoleName.ADMIN, Department.ADMIN)
    staff = make_user(RoleName.STAFF, Department.CSE)
    student = make_user(RoleName.STUDENT, Department.CSE)
    leaves = LeaveService(session_factory)
    leave = leaves.apply(
        principal_for(student),
        LeaveApplyRequest(
            requested_to=staff.id,
            start_date=date(2024, 5, 6),
            end_date=date(2024, 5, 8),
            leave_type=LeaveType.FULL_DAY,
            reason="Sister's wedding",
        ),
    )
    leaves.transition_status(principal_for(staff), leave.id, LeaveStatus.APPROVED)

    with pytest.raises(ConflictError):
        users.delete_user(staff.id)

    balance = leaves.get_balance(principal_for(admin), student.id)
    assert (balance.available, balance.used) == (27, 3)
    history = leaves.list_personal(principal_for(admin), student.id, PAGE)
    assert [item.id for item in history.data] == [leave.id]


def test_deleting_requester_removes_their_own_requests(users, make_user, session_factory):
    staff = make_user(RoleName.STAFF, Department.CSE)
    student = make_user(RoleName.STUDENT, Department.CSE)
    leaves = LeaveService(session_factory)
    leaves.apply(
        principal_for(student),
        LeaveApplyRequest(
            requested_to=staff.id,
            start_date=date(2024, 5, 6),
            end_date=date(2024, 5, 6),
            leave_type=LeaveType.HALF_DAY,
            reason="Dentist appointment",
        ),
    )

    users.delete_user(student.id)

    inbox = leaves.list_inbox(principal_for(staff), PAGE)
    assert inbox.pagination.total == 0
    users.delete_user(staff.id)
    with pytest.raises(NotFoundError):
        users.delete_user(staff.id)


def test_listing_excludes_caller_and_scopes_department(users, make_user):
    admin = make_user(RoleName.ADMIN, Department.ADMIN)
    hod = make_user(RoleName.HOD, Department.CSE)
    cse_student = make_user(RoleName.STUDENT, Department.CSE)
    make_user(RoleName.STUDENT, Department.ECE)

    admin_view = users.list_users(principal_for(admin), PAGE)
    assert admin_view.pagination.total == 3
    assert admin.id not in {u.id for u in admin_view.data}

    hod_view = users.list_users(principal_for(hod), PAGE)
    assert [u.id for u in hod_view.data] == [cse_student.id]


def test_listing_role_filter_search_and_sort(users, make_user):
    admin = make_user(RoleName.ADMIN, Department.ADMIN)
    make_user(RoleName.STAFF, Department.CSE, name="Zara")
    make_user(RoleName.STAFF, Department.CSE, name="Anil")
    make_user(RoleName.STUDENT, Department.CSE, name="Meera")
    caller = principal_for(admin)

    staff_only = users.list_users(caller, PAGE, role_id="3", sort_col="name", sort_dir="asc")
    assert [u.name for u in staff_only.data] == ["Anil", "Zara"]

    everyone = users.list_users(caller, PAGE, role_id="All")
    assert everyone.pagination.total == 3

    found = users.list_users(caller, PAGE, search="mee")
    assert [u.name for u in found.data] == ["Meera"]


def test_listing_pages(users, make_user):
    admin = make_user(RoleName.ADMIN, Department.ADMIN)
    for _ in range(25):
        make_user(RoleName.STUDENT)

    page = users.list_users(principal_for(admin), PaginationParams(page=2, limit=10))

    assert len(page.data) == 10
    assert page.pagination.total == 25
    assert page.pagination.total_pages == 3


def test_students_directory(users, make_user):
    make_user(RoleName.STAFF)
    student = make_user(RoleName.STUDENT)
    assert [u.id for u in users.list_students()] == [student.id]


def test_profile_update_touches_only_own_record(users, make_user):
    student = make_user(RoleName.STUDENT)
    updated = users.update_profile(
        principal_for(student),
        ProfileUpdateRequest(gender=Gender.OTHER, address="Room 12"),
    )
    assert updated.gender == Gender.OTHER
    assert updated.address == "Room 12"
    assert updated.email == student.email


def test_dashboard_stats(users, make_user, session_factory):
    staff = make_user(RoleName.STAFF, Department.CSE)
    student = make_user(RoleName.STUDENT, Department.CSE)
    leaves = LeaveService(session_factory)
    request = LeaveApplyRequest(
        requested_to=staff.id,
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 1),
        leave_type=LeaveType.CASUAL_LEAVE,
        reason="Personal errand",
    )
    first = leaves.apply(principal_for(student), request)
    leaves.apply(principal_for(student), request)
    leaves.transition_status(principal_for(staff), first.id, LeaveStatus.APPROVED)

    stats = users.dashboard_stats()

    assert stats.pending == 1
    assert stats.approved == 1
    assert stats.rejected == 0
    assert stats.total_leaves == 2
    assert stats.total_users == 2
