"""
Tests for Authentication Endpoints

Tests:
- Registration (cookie issued, email normalised, duplicates rejected generically)
- Password and email validation
- Login / logout
- The auth gate on protected routes (/auth/me, /books)
"""

from datetime import timedelta

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.models import User
from bookshelf.services.security import create_access_token, verify_password
from tests.conftest import API, DEFAULT_PASSWORD, register


class TestUserRegistration:
    """Tests for POST /api/auth/register."""

    def test_register_success(self, client: TestClient):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "reader@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["user"]["email"] == "reader@example.com"
        assert isinstance(data["user"]["id"], int)
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_register_sets_session_cookie(self, client: TestClient):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "reader@example.com", "password": DEFAULT_PASSWORD},
        )

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("auth_token=")
        assert "HttpOnly" in cookie
        assert "SameSite=strict" in cookie or "samesite=strict" in cookie.lower()
        assert "Max-Age=604800" in cookie

    def test_register_email_normalized_to_lowercase(self, client: TestClient):
        user = register(client, "Reader@Example.COM")
        assert user["email"] == "reader@example.com"

    def test_register_duplicate_email_is_generic(self, client: TestClient):
        register(client, "reader@example.com")

        response = client.post(
            f"{API}/auth/register",
            json={"email": "READER@example.com", "password": "another-password"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        detail = response.json()["detail"]
        assert detail == "Registration failed"
        assert "exist" not in detail.lower()
        assert "taken" not in detail.lower()

    def test_password_stored_as_hash(self, client: TestClient, db_session: Session):
        register(client, "reader@example.com")

        user = db_session.execute(
            select(User).where(User.email == "reader@example.com")
        ).scalar_one()

        assert user.password_hash != DEFAULT_PASSWORD
        assert user.password_hash.startswith("$2")
        assert verify_password(DEFAULT_PASSWORD, user.password_hash)


class TestCredentialValidation:
    """Email and password rules on registration."""

    def test_password_too_short(self, client: TestClient):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "reader@example.com", "password": "short"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = [e["field"] for e in response.json()["errors"]]
        assert "password" in fields

    def test_password_too_long(self, client: TestClient):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "reader@example.com", "password": "x" * 73},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_password_over_72_bytes(self, client: TestClient):
        # 40 characters, 80 bytes in UTF-8
        response = client.post(
            f"{API}/auth/register",
            json={"email": "reader@example.com", "password": "é" * 40},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_email_format(self, client: TestClient):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "not-an-email", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = [e["field"] for e in response.json()["errors"]]
        assert "email" in fields

    def test_missing_body(self, client: TestClient):
        response = client.post(f"{API}/auth/register")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_success(self, client: TestClient):
        register(client, "reader@example.com")
        client.cookies.clear()

        response = client.post(
            f"{API}/auth/login",
            json={"email": "reader@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == "reader@example.com"
        assert "auth_token" in response.cookies

    def test_login_is_case_insensitive_on_email(self, client: TestClient):
        register(client, "reader@example.com")
        client.cookies.clear()

        response = client.post(
            f"{API}/auth/login",
            json={"email": "Reader@Example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == status.HTTP_200_OK

    def test_login_wrong_password(self, client: TestClient):
        register(client, "reader@example.com")
        client.cookies.clear()

        response = client.post(
            f"{API}/auth/login",
            json={"email": "reader@example.com", "password": "wrong-password"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid credentials"
        assert "auth_token" not in response.cookies

    def test_login_nonexistent_user(self, client: TestClient):
        response = client.post(
            f"{API}/auth/login",
            json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid credentials"

    def test_login_missing_password(self, client: TestClient):
        response = client.post(f"{API}/auth/login", json={"email": "reader@example.com"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestLogout:
    """Tests for POST /api/auth/logout."""

    def test_logout_clears_cookie(self, auth_client: TestClient):
        response = auth_client.post(f"{API}/auth/logout")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Logged out"}

        # The cookie is expired, so the next request is anonymous
        assert auth_client.get(f"{API}/auth/me").status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_without_session(self, client: TestClient):
        response = client.post(f"{API}/auth/logout")
        assert response.status_code == status.HTTP_200_OK


class TestGetMe:
    """Tests for GET /api/auth/me and the auth gate."""

    def test_get_me_success(self, auth_client: TestClient):
        response = auth_client.get(f"{API}/auth/me")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"] == auth_client.user

    def test_get_me_no_token(self, client: TestClient):
        response = client.get(f"{API}/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Authentication required"

    def test_get_me_invalid_token(self, client: TestClient):
        response = client.get(f"{API}/auth/me", headers={"Cookie": "auth_token=not.a.jwt"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid or expired token"

    def test_get_me_expired_token(self, client: TestClient):
        token = create_access_token(1, "reader@example.com", expires_delta=timedelta(seconds=-1))
        response = client.get(f"{API}/auth/me", headers={"Cookie": f"auth_token={token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_bearer_header_is_not_accepted(self, client: TestClient):
        token = create_access_token(1, "reader@example.com")

        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_protected_routes_require_session(self, client: TestClient):
        for method, path in [
            ("get", "/books"),
            ("post", "/books"),
            ("get", "/books/1"),
            ("put", "/books/1"),
            ("delete", "/books/1"),
            ("get", "/tags"),
            ("post", "/tags"),
            ("get", "/search?q=dune"),
            ("get", "/search/isbn/9780441172719"),
        ]:
            response = client.request(method, f"{API}{path}")
            assert response.status_code == status.HTTP_401_UNAUTHORIZED, (method, path)
