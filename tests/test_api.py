from fastapi.testclient import TestClient

from leave_api.core.constants import Messages
from leave_api.main import create_app
from leave_api.models.base.enums import Department, RoleName
from leave_api.services.auth import GoogleProfile

from conftest import PASSWORD, auth_header

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 32

LEAVE_BODY = {
    "startDate": "2024-03-04",
    "endDate": "2024-03-05",
    "leaveType": "FULL_DAY",
    "reason": "Family function",
}


def _register_body(**overrides):
    body = {
        "email": "nila@college.edu",
        "password": PASSWORD,
        "name": "Nila",
        "gender": "FEMALE",
        "phone": "9000000002",
        "address": "Hostel C",
        "department": "CSE",
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}
    assert "X-Request-ID" in response.headers


def test_register_login_and_verify(client):
    created = client.post("/register", json=_register_body())
    assert created.status_code == 201
    assert created.json()["data"]["role"] == "STUDENT"
    assert "password" not in created.json()["data"]

    login = client.post("/login", json={"email": "nila@college.edu", "password": PASSWORD})
    assert login.status_code == 200
    assert login.json()["message"] == Messages.LOGIN_SUCCESSFUL
    token = login.json()["data"]["token"]
    assert client.cookies.get("token") == token

    # Cookie only
    verified = client.post("/verify")
    assert verified.json()["authenticated"] is True
    assert verified.json()["user"]["roleId"] == "4"

    client.cookies.clear()
    by_body = client.post("/me", json={"token": token})
    assert by_body.json()["user"]["email"] == "nila@college.edu"

    me = client.get("/whoami", headers={"token": token})
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Nila"


def test_login_errors(client, make_user):
    staff = make_user(RoleName.STAFF)

    unknown = client.post("/login", json={"email": "ghost@college.edu", "password": PASSWORD})
    assert unknown.status_code == 404
    assert unknown.json()["error"] == Messages.USER_NOT_FOUND

    wrong = client.post("/login", json={"email": staff.email, "password": "not-it-at-all"})
    assert wrong.status_code == 401
    assert wrong.json()["error"] == Messages.INVALID_PASSWORD


def test_logout_clears_cookie(client, make_user):
    staff = make_user(RoleName.STAFF)
    client.post("/login", json={"email": staff.email, "password": PASSWORD})
    assert client.cookies.get("token")

    response = client.post("/logout")
    assert response.status_code == 200
    assert client.cookies.get("token") is None


def test_missing_token_and_forbidden_role(client, make_user, login):
    student = make_user(RoleName.STUDENT)

    anonymous = client.get("/leaves")
    assert anonymous.status_code == 401
    assert anonymous.json() == {"error": Messages.TOKEN_NOT_FOUND, "details": None}

    forbidden = client.get("/leaves", headers=auth_header(login(student.email)))
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == Messages.FORBIDDEN


def test_invalid_body_uses_error_envelope(client, make_user, login):
    student = make_user(RoleName.STUDENT)
    response = client.post(
        "/apply-leave",
        json={"reason": "x"},
        headers=auth_header(login(student.email)),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == Messages.INVALID_INPUT
    assert {detail["field"] for detail in body["details"]} >= {"requestedTo", "startDate"}


def test_leave_lifecycle_over_http(client, make_user, login):
    staff = make_user(RoleName.STAFF, Department.CSE)
    student = make_user(RoleName.STUDENT, Department.CSE)
    student_token = login(student.email)
    staff_token = login(staff.email)

    approvers = client.get("/staff", headers=auth_header(student_token))
    assert approvers.json()["data"] == [{"id": staff.id, "name": staff.name}]

    applied = client.post(
        "/apply-leave",
        json={**LEAVE_BODY, "requestedTo": staff.id},
        headers=auth_header(student_token),
    )
    assert applied.status_code == 201
    leave_id = applied.json()["data"]["id"]
    assert applied.json()["data"]["status"] == "PENDING"

    inbox = client.get("/leaves", headers=auth_header(staff_token))
    assert inbox.json()["pagination"] == {"total": 1, "page": 1, "limit": 10, "totalPages": 1}

    approved = client.patch(
        f"/leave/{leave_id}",
        json={"status": "APPROVED"},
        headers=auth_header(staff_token),
    )
    assert approved.status_code == 200
    assert approved.json()["data"]["approvedById"] == staff.id

    again = client.patch(
        f"/leave/{leave_id}",
        json={"status": "APPROVED"},
        headers=auth_header(staff_token),
    )
    assert again.status_code == 409

    balance = client.get(f"/leaves-balance/{student.id}", headers=auth_header(student_token))
    assert balance.json()["data"]["available"] == 28
    assert balance.json()["data"]["used"] == 2

    history = client.get(
        f"/personal-leaves/{student.id}?status=APPROVED",
        headers=auth_header(student_token),
    )
    assert [item["id"] for item in history.json()["data"]] == [leave_id]

    calendar = client.get("/dashboard", headers=auth_header(student_token))
    assert calendar.json()["data"][0]["calendarId"] == "FULL_DAY"

    deleted = client.delete(f"/delete-leave/{leave_id}", headers=auth_header(student_token))
    assert deleted.json() == {"message": Messages.LEAVE_DELETED}
    balance = client.get(f"/leaves-balance/{student.id}", headers=auth_header(student_token))
    assert balance.json()["data"]["available"] == 30


def test_leave_listing_query_filters_and_approver_deletion(client, make_user, login):
    admin = make_user(RoleName.ADMIN, Department.ADMIN)
    staff = make_user(RoleName.STAFF, Department.CSE)
    student = make_user(RoleName.STUDENT, Department.CSE)
    student_token = login(student.email)
    client.post(
        "/apply-leave",
        json={**LEAVE_BODY, "requestedTo": staff.id},
        headers=auth_header(student_token),
    )

    url = f"/personal-leaves/{student.id}"
    inside = client.get(f"{url}?from=2024-03-05&to=2024-03-31", headers=auth_header(student_token))
    assert inside.json()["pagination"]["total"] == 1
    before = client.get(f"{url}?to=2024-03-03", headers=auth_header(student_token))
    assert before.json()["pagination"]["total"] == 0
    other = client.get(f"{url}?approver={admin.id}", headers=auth_header(student_token))
    assert other.json()["data"] == []

    reversed_range = client.get(
        "/leaves?from=2024-04-01&to=2024-03-01", headers=auth_header(login(staff.email))
    )
    assert reversed_range.status_code == 400

    refused = client.delete(f"/user/{staff.id}", headers=auth_header(login(admin.email)))
    assert refused.status_code == 409
    assert refused.json()["error"] == Messages.USER_HAS_ASSIGNED_LEAVES


def test_admin_user_management(client, make_user, login):
    admin = make_user(RoleName.ADMIN, Department.ADMIN)
    token = login(admin.email)

    created = client.post(
        "/signup",
        json=_register_body(email="lecturer@college.edu", name="Lecturer", roleId="3"),
        headers=auth_header(token),
    )
    assert created.status_code == 201
    user_id = created.json()["data"]["id"]

    duplicate = client.post(
        "/signup",
        json=_register_body(email="lecturer@college.edu", roleId="3"),
        headers=auth_header(token),
    )
    assert duplicate.status_code == 409

    listed = client.post("/users?roleID=3&col=name&sort=asc", headers=auth_header(token))
    assert [u["id"] for u in listed.json()["data"]] == [user_id]

    bad_page = client.post("/users?page=0", headers=auth_header(token))
    assert bad_page.status_code == 400

    updated = client.patch(f"/user/{user_id}", json={"roleId": "2"}, headers=auth_header(token))
    assert updated.json()["data"]["role"] == "HOD"

    stats = client.get("/dashboard-stats", headers=auth_header(token))
    assert stats.json()["data"]["totalUsers"] == 2

    removed = client.delete(f"/user/{user_id}", headers=auth_header(token))
    assert removed.status_code == 200
    missing = client.delete(f"/user/{user_id}", headers=auth_header(token))
    assert missing.status_code == 404


def test_signup_is_admin_only(client, make_user, login):
    hod = make_user(RoleName.HOD)
    response = client.post(
        "/signup",
        json=_register_body(roleId="4"),
        headers=auth_header(login(hod.email)),
    )
    assert response.status_code == 403


def test_profile_update_and_image_upload(client, make_user, login, image_store):
    student = make_user(RoleName.STUDENT)
    token = login(student.email)

    profile = client.patch("/update-profile", json={"phone": "9555555555"}, headers=auth_header(token))
    assert profile.json()["data"]["phone"] == "9555555555"

    uploaded = client.post(
        "/upload-image",
        files={"image": ("me.png", PNG, "image/png")},
        headers=auth_header(token),
    )
    assert uploaded.status_code == 200
    assert uploaded.json()["data"]["imageUrl"].startswith("https://res.cloudinary.com/")

    rejected = client.post(
        "/upload-image",
        files={"image": ("me.gif", PNG, "image/gif")},
        headers=auth_header(token),
    )
    assert rejected.status_code == 400
    assert rejected.json()["error"] == Messages.INVALID_IMAGE


def test_blog_routes(client, make_user, login):
    student = make_user(RoleName.STUDENT)
    staff = make_user(RoleName.STAFF)

    created = client.post(
        "/blogs",
        json={"title": "Fest", "content": "Cultural fest next week"},
        headers=auth_header(login(student.email)),
    )
    assert created.status_code == 201
    assert created.json()["data"]["authorName"] == student.name

    denied = client.get("/blogs", headers=auth_header(login(staff.email)))
    assert denied.status_code == 403


def test_password_reset_flow(client, make_user, mailer):
    student = make_user(RoleName.STUDENT, email="reset.me@college.edu")

    sent = client.post("/forgetPassword", json={"email": student.email})
    assert sent.json() == {"message": Messages.OTP_SENT}
    code = mailer.to(student.email)[0].body_text.rsplit(" ", 1)[-1]

    matched = client.post("/match-otp", json={"email": student.email, "otp": code})
    assert matched.status_code == 200

    reset = client.post(
        "/reset-password",
        json={"email": student.email, "otp": code, "password": "fresh-password"},
    )
    assert reset.json() == {"message": Messages.PASSWORD_UPDATED}

    login = client.post("/login", json={"email": student.email, "password": "fresh-password"})
    assert login.status_code == 200

    reused = client.post("/match-otp", json={"email": student.email, "otp": code})
    assert reused.status_code == 404


def test_google_sign_in_disabled_without_credentials(client):
    response = client.get("/auth/google", follow_redirects=False)
    assert response.status_code == 404


class FakeGoogle:
    def __init__(self):
        self.codes = []

    def authorization_url(self):
        return "https://accounts.google.com/o/oauth2/v2/auth?state=s-123", "s-123"

    async def fetch_profile(self, code):
        self.codes.append(code)
        return GoogleProfile(email="gopal@gmail.com", name="Gopal", picture=None)


def test_google_sign_in_flow(settings, session_factory, mailer, image_store):
    google = FakeGoogle()
    app = create_app(
        settings,
        session_factory=session_factory,
        mailer=mailer,
        image_store=image_store,
        oauth_client=google,
    )
    with TestClient(app) as client:
        start = client.get("/auth/google", follow_redirects=False)
        assert start.status_code == 302
        assert start.headers["location"].startswith("https://accounts.google.com/")
        assert client.cookies.get("oauth_state") == "s-123"

        forged = client.get("/auth/google/callback?state=other&code=c1", follow_redirects=False)
        assert forged.headers["location"] == "http://frontend.test/login"
        assert google.codes == []

        client.get("/auth/google", follow_redirects=False)
        done = client.get("/auth/google/callback?state=s-123&code=c2", follow_redirects=False)
        assert done.status_code == 302
        assert done.headers["location"] == "http://frontend.test/dashboard"
        assert google.codes == ["c2"]

        token = client.cookies.get("token")
        client.cookies.clear()
        me = client.get("/whoami", headers=auth_header(token))
        assert me.json()["data"]["email"] == "gopal@gmail.com"
        assert me.json()["data"]["provider"] == "GOOGLE"
