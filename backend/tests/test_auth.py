"""
Authentication endpoint tests.

Tests for:
- Registration endpoint
- Login endpoint
- Current user profile (with stats) and profile updates
- Token validation
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from newsbrief.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from newsbrief.models.user import User

TEST_PASSWORD = "testpass123"

NOT_AUTHORIZED = "Not authorized to access this route"


# ================================
# Registration Endpoint Tests
# ================================

@pytest.mark.asyncio
class TestRegistration:
    """Test registration endpoint."""

    async def test_register_success(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "  Alice Johnson ", "email": "alice@example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert data["user"]["name"] == "Alice Johnson"
        assert data["user"]["email"] == "alice@example.com"
        assert isinstance(data["user"]["id"], int)

        claims = decode_access_token(data["token"])
        assert claims["sub"] == str(data["user"]["id"])

    async def test_register_lowercases_email(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Bob", "email": "Bob.Smith@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "bob.smith@example.com"

    async def test_register_duplicate_email(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Someone Else", "email": "TEST@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "User already exists"}

    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Carol", "email": "carol@example.com", "password": "12345"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "password" in body["error"]

    async def test_register_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Dave", "email": "not-an-email", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False


# ================================
# Login Endpoint Tests
# ================================

@pytest.mark.asyncio
class TestLogin:
    """Test login endpoint."""

    async def test_login_success(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {"id": test_user.id, "name": "Test User", "email": "test@example.com"}
        assert decode_access_token(data["token"])["sub"] == str(test_user.id)

    async def test_login_email_is_case_insensitive(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/login",
            json={"email": "Test@Example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    async def test_login_user_not_found(self, client: AsyncClient):
        """Unknown email gets the same answer as a wrong password."""
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"


# ================================
# Current User Tests
# ================================

@pytest.mark.asyncio
class TestCurrentUser:
    """Test /auth/me and bearer token handling."""

    async def test_me_returns_profile_and_stats(
        self,
        client: AsyncClient,
        test_user: User,
        auth_headers: dict,
    ):
        response = await client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["_id"] == test_user.id
        assert data["name"] == "Test User"
        assert data["email"] == "test@example.com"
        assert data["savedArticles"] == []
        assert data["preferences"] == {}
        assert "createdAt" in data
        assert "hashedPassword" not in data
        assert data["stats"] == {
            "summariesGenerated": 0,
            "articlesRead": 0,
            "daysActive": 1,
            "savedArticles": 0,
        }

    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": NOT_AUTHORIZED}

    async def test_me_with_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json()["error"] == NOT_AUTHORIZED

    async def test_me_with_expired_token(self, client: AsyncClient, test_user: User):
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(hours=-1))

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    async def test_me_for_deleted_user(self, client: AsyncClient):
        token = create_access_token({"sub": "9999"})

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == NOT_AUTHORIZED


# ================================
# Profile Update Tests
# ================================

@pytest.mark.asyncio
class TestProfileUpdate:
    """Test PUT /auth/profile."""

    async def test_update_name_and_preferences(
        self,
        client: AsyncClient,
        test_user: User,
        auth_headers: dict,
    ):
        response = await client.put(
            "/api/auth/profile",
            headers=auth_headers,
            json={"name": "Renamed", "preferences": {"categories": ["science"], "theme": "dark"}},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Renamed"
        assert data["preferences"] == {"categories": ["science"], "theme": "dark"}
        assert test_user.name == "Renamed"

    async def test_email_and_password_are_ignored(
        self,
        client: AsyncClient,
        test_user: User,
        auth_headers: dict,
    ):
        old_hash = test_user.hashed_password

        response = await client.put(
            "/api/auth/profile",
            headers=auth_headers,
            json={"email": "hijack@example.com", "password": "newpassword"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "test@example.com"
        assert test_user.email == "test@example.com"
        assert test_user.hashed_password == old_hash

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.put("/api/auth/profile", json={"name": "X"})

        assert response.status_code == 401


# ================================
# Security Helper Tests
# ================================

class TestSecurityHelpers:
    def test_password_hash_roundtrip(self):
        hashed = get_password_hash("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_verify_password_with_malformed_hash(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_tampered_token_is_rejected(self):
        token = create_access_token({"sub": "1"})
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        assert decode_access_token(tampered) is None
