import pytest

from leave_api.core.constants import MAX_PAGE_SIZE
from leave_api.models.base.enums import Department, RoleName
from leave_api.schemas.common.pagination import PaginatedResponse, PaginationParams
from leave_api.services.common.errors import AuthenticationError
from leave_api.services.common.pagination import PaginationError, build_page_params
from leave_api.services.common.permissions import CAPABILITIES, AccessGuard, PermissionDenied
from leave_api.services.common.security import JWTSettings, create_access_token
from leave_api.services.users import UserService

from conftest import JWT_SECRET


@pytest.fixture
def guard(session_factory, jwt_settings):
    return AccessGuard(jwt_settings, session_factory)


def _token_for(user, secret=JWT_SECRET):
    return create_access_token(
        claims={"id": user.id, "email": user.email, "role": user.role.value, "roleId": user.role_id, "name": user.name},
        jwt_settings=JWTSettings(secret_key=secret),
    )


def test_guard_resolves_principal_from_stored_user(guard, make_user):
    hod = make_user(RoleName.HOD, Department.CIVIL)

    principal = guard.check(_token_for(hod), "leave.inbox")

    assert principal.user_id == hod.id
    assert principal.role == RoleName.HOD
    assert principal.department == Department.CIVIL


def test_guard_refuses_missing_or_foreign_tokens(guard, make_user):
    staff = make_user(RoleName.STAFF)
    with pytest.raises(AuthenticationError):
        guard.check(None, "leave.apply")
    with pytest.raises(AuthenticationError):
        guard.check(_token_for(staff, secret="not-ours"), "leave.apply")


def test_guard_refuses_tokens_of_deleted_users(guard, make_user, session_factory):
    student = make_user(RoleName.STUDENT)
    token = _token_for(student)
    guard.check(token, "leave.apply")

    UserService(session_factory).delete_user(student.id)

    with pytest.raises(AuthenticationError):
        guard.check(token, "leave.apply")


@pytest.mark.parametrize(
    "role, capability, allowed",
    [
        (RoleName.STUDENT, "leave.inbox", False),
        (RoleName.STAFF, "leave.inbox", True),
        (RoleName.HOD, "user.list", True),
        (RoleName.STAFF, "user.list", False),
        (RoleName.HOD, "user.create", False),
        (RoleName.ADMIN, "leave.chart", True),
        (RoleName.HOD, "leave.chart", False),
        (RoleName.STAFF, "blog.read", False),
        (RoleName.STUDENT, "blog.write", True),
        (RoleName.STUDENT, "student.list", True),
    ],
)
def test_capability_table(guard, make_user, role, capability, allowed):
    token = _token_for(make_user(role))
    if allowed:
        guard.check(token, capability)
    else:
        with pytest.raises(PermissionDenied):
            guard.check(token, capability)


def test_every_capability_names_known_roles():
    for roles in CAPABILITIES.values():
        assert roles
        assert all(isinstance(role, RoleName) for role in roles)


def test_page_params_defaults_and_bounds():
    params = build_page_params(None, None)
    assert (params.page, params.limit, params.offset) == (1, 10, 0)
    assert build_page_params(3, 20).offset == 40

    for page, limit in [(0, 10), (1, 0), (1, MAX_PAGE_SIZE + 1), (-2, 5)]:
        with pytest.raises(PaginationError):
            build_page_params(page, limit)


def test_total_pages_rounds_up():
    page = PaginatedResponse.create("ok", [], total=25, params=PaginationParams(page=2, limit=10))
    assert page.pagination.total_pages == 3

    empty = PaginatedResponse.create("ok", [], total=0, params=PaginationParams(page=1, limit=10))
    assert empty.pagination.total_pages == 0

    body = page.model_dump(by_alias=True)
    assert set(body["pagination"]) == {"total", "page", "limit", "totalPages"}
