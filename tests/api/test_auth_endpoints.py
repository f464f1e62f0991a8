"""Tests for the authentication endpoints."""

from __future__ import annotations

import asyncio

from chatline.api.dependencies import SESSION_COOKIE
from chatline.core.security import hash_password, verify_password
from chatline.models import User
from chatline.services import auth as auth_module
from tests.conftest import TEST_PASSWORD

SIGNUP_URL = "/api/auth/signup"
LOGIN_URL = "/api/auth/login"
LOGOUT_URL = "/api/auth/logout"
CHECK_URL = "/api/auth/check"
UPDATE_PROFILE_URL = "/api/auth/update-profile"


def build_signup_payload(**overrides):
    payload = {
        "fullName": "John Doe",
        "email": "john@example.com",
        "password": "password123",
    }
    payload.update(overrides)
    return payload


class TestSignup:
    def test_creates_account_and_starts_session(self, client, db_session, codec):
        response = client.post(SIGNUP_URL, json=build_signup_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        user = body["user"]
        assert user["email"] == "john@example.com"
        assert user["fullName"] == "John Doe"
        assert user["profilePic"] == ""
        assert user["id"]
        assert "password" not in user

        token = response.cookies.get(SESSION_COOKIE)
        assert token
        assert codec.verify(token) == user["id"]
        assert db_session.get(User, user["id"]) is not None

    def test_session_cookie_attributes(self, client):
        response = client.post(SIGNUP_URL, json=build_signup_payload())

        cookie_header = response.headers["set-cookie"].lower()
        assert cookie_header.startswith(f"{SESSION_COOKIE}=")
        assert "httponly" in cookie_header
        assert "samesite=strict" in cookie_header
        assert "max-age=604800" in cookie_header

    def test_queues_welcome_email(self, client, notifier):
        client.post(SIGNUP_URL, json=build_signup_payload())
        assert notifier.sent == [("john@example.com", "John Doe")]

    def test_new_session_can_check(self, client):
        client.post(SIGNUP_URL, json=build_signup_payload())

        response = client.get(CHECK_URL)
        assert response.status_code == 200
        assert response.json()["email"] == "john@example.com"

    def test_duplicate_email(self, client, test_user, notifier):
        response = client.post(SIGNUP_URL, json=build_signup_payload(email=test_user.email))

        assert response.status_code == 400
        assert response.json() == {"detail": "Email already exists"}
        assert SESSION_COOKIE not in response.cookies
        assert notifier.sent == []

    def test_missing_field(self, client, db_session):
        response = client.post(SIGNUP_URL, json={"email": "a@b.co", "password": "password123"})

        assert response.status_code == 400
        assert response.json() == {"detail": "All fields are required"}
        assert db_session.query(User).count() == 0

    def test_short_password(self, client):
        response = client.post(SIGNUP_URL, json=build_signup_payload(password="12345"))
        assert response.status_code == 400
        assert response.json() == {"detail": "Password must be at least 6 characters"}

    def test_invalid_email(self, client):
        response = client.post(SIGNUP_URL, json=build_signup_payload(email="john@example"))
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid email format"}

    def test_malformed_body(self, client):
        response = client.post(
            SIGNUP_URL,
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid request body"}

    def test_wrong_field_type(self, client):
        response = client.post(SIGNUP_URL, json=build_signup_payload(fullName=["John"]))
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid request body"}


class TestLogin:
    def test_valid_credentials(self, client, test_user, codec):
        response = client.post(
            LOGIN_URL, json={"email": test_user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["id"] == test_user.id
        assert "password" not in body["user"]
        assert codec.verify(response.cookies[SESSION_COOKIE]) == test_user.id

    def test_wrong_password_matches_unknown_email(self, client, test_user):
        wrong_password = client.post(
            LOGIN_URL, json={"email": test_user.email, "password": "not-the-password"}
        )
        unknown_email = client.post(
            LOGIN_URL, json={"email": "ghost@example.com", "password": TEST_PASSWORD}
        )

        for response in (wrong_password, unknown_email):
            assert response.status_code == 400
            assert response.json() == {"detail": "Invalid credentials"}
            assert SESSION_COOKIE not in response.cookies

    def test_missing_password(self, client, test_user):
        response = client.post(LOGIN_URL, json={"email": test_user.email})
        assert response.status_code == 400
        assert response.json() == {"detail": "Email and password are required"}


class TestLogout:
    def test_clears_cookie_and_ends_session(self, client, test_user):
        login = client.post(LOGIN_URL, json={"email": test_user.email, "password": TEST_PASSWORD})
        assert login.status_code == 200
        assert client.get(CHECK_URL).status_code == 200

        response = client.post(LOGOUT_URL)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}
        assert "max-age=0" in response.headers["set-cookie"].lower()

        check = client.get(CHECK_URL)
        assert check.status_code == 401
        assert check.json() == {"detail": "Unauthorized - No token provided"}

    def test_logout_without_session_is_ok(self, client):
        first = client.post(LOGOUT_URL)
        second = client.post(LOGOUT_URL)
        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()
        for response in (first, second):
            cookie_header = response.headers["set-cookie"].lower()
            assert cookie_header.startswith(f"{SESSION_COOKIE}=")
            assert "max-age=0" in cookie_header
        assert SESSION_COOKIE not in client.cookies


class TestCheck:
    def test_returns_current_user(self, auth_client, test_user):
        response = auth_client.get(CHECK_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == test_user.id
        assert body["email"] == test_user.email
        assert body["fullName"] == test_user.full_name
        assert body["createdAt"].endswith("Z")
        assert body["updatedAt"].endswith("Z")
        assert "password" not in body


class TestUpdateProfile:
    def test_uploads_and_returns_updated_user(self, auth_client, test_user, uploader):
        response = auth_client.put(
            UPDATE_PROFILE_URL, json={"profilePic": "data:image/png;base64,AAAA"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        updated = body["updatedUser"]
        assert updated["id"] == test_user.id
        assert updated["profilePic"] == "https://res.cloudinary.com/test/image/upload/1.png"
        assert "password" not in updated
        assert uploader.calls[0]["folder"] == "profile_pics"

        check = auth_client.get(CHECK_URL)
        assert check.json()["profilePic"] == updated["profilePic"]

    def test_missing_picture(self, auth_client, uploader):
        response = auth_client.put(UPDATE_PROFILE_URL, json={})

        assert response.status_code == 400
        assert response.json() == {"detail": "Profile pic is required"}
        assert uploader.calls == []

    def test_requires_session(self, client, uploader):
        response = client.put(UPDATE_PROFILE_URL, json={"profilePic": "data:image/png;base64,AAAA"})

        assert response.status_code == 401
        assert uploader.calls == []


def _event_loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestPasswordHashingOffLoop:
    """bcrypt is CPU-bound; signup and login must not run it on the event loop."""

    def test_signup_hashes_in_worker_thread(self, client, monkeypatch):
        seen: list[bool] = []

        def recording_hash(password: str) -> str:
            seen.append(_event_loop_running())
            return hash_password(password)

        monkeypatch.setattr(auth_module, "hash_password", recording_hash)
        response = client.post(SIGNUP_URL, json=build_signup_payload())

        assert response.status_code == 201
        assert seen == [False]

    def test_login_verifies_in_worker_thread(self, client, test_user, monkeypatch):
        seen: list[bool] = []

        def recording_verify(plain: str, hashed: str) -> bool:
            seen.append(_event_loop_running())
            return verify_password(plain, hashed)

        monkeypatch.setattr(auth_module, "verify_password", recording_verify)
        ok = client.post(LOGIN_URL, json={"email": test_user.email, "password": TEST_PASSWORD})
        unknown = client.post(
            LOGIN_URL, json={"email": "ghost@example.com", "password": TEST_PASSWORD}
        )

        assert ok.status_code == 200
        assert unknown.status_code == 400
        assert seen == [False, False]
