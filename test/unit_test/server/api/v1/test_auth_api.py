"""Tests for registration, login and token verification."""

import pytest

from cgplayer.core.models.domain.enums import UserRole
from cgplayer.core.security import decode_access_token

REGISTRATION = {
    "email": "Nueva@Example.com",
    "username": "nueva",
    "password": "secret123",
    "first_name": "Nueva",
    "last_name": "Cantante",
}


class TestRegister:
    async def test_register_creates_singer(self, client, settings):
        response = await client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "nueva@example.com"
        assert body["user"]["roles"] == ["CANTANTE"]
        assert "password_hash" not in body["user"]
        payload = decode_access_token(body["token"], secret=settings.jwt.secret)
        assert payload["sub"] == body["user"]["id"]
        assert payload["roles"] == ["CANTANTE"]

    async def test_register_with_location(self, client, make_location):
        location = await make_location()

        response = await client.post("/api/auth/register", json={**REGISTRATION, "location_id": location.id})

        assert response.status_code == 201
        assert response.json()["user"]["location"]["name"] == "Sede Centro"

    async def test_register_unknown_location(self, client):
        response = await client.post("/api/auth/register", json={**REGISTRATION, "location_id": "nope"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Location not found"

    async def test_duplicate_email_case_insensitive(self, client, make_user):
        await make_user("otra", email="nueva@example.com")

        response = await client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    async def test_duplicate_username(self, client, make_user):
        await make_user("nueva", email="other@example.com")

        response = await client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 400
        assert response.json()["detail"] == "Username already taken"

    @pytest.mark.parametrize(
        "override",
        [
            {"email": "not-an-email"},
            {"username": "ab"},
            {"username": "x" * 21},
            {"password": "12345"},
            {"first_name": ""},
        ],
    )
    async def test_invalid_input(self, client, override):
        response = await client.post("/api/auth/register", json={**REGISTRATION, **override})

        assert response.status_code == 400
        assert response.json()["detail"] == "Validation error"


class TestLogin:
    async def test_login_with_email(self, client, make_user):
        user, _ = await make_user("tenor")

        response = await client.post("/api/auth/login", json={"login": "TENOR@example.com", "password": "secret123"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["id"] == user.id

    async def test_login_with_username(self, client, make_user):
        await make_user("tenor", roles=(UserRole.CANTANTE, UserRole.DIRECTOR))

        response = await client.post("/api/auth/login", json={"login": "tenor", "password": "secret123"})

        assert response.status_code == 200
        assert sorted(response.json()["user"]["roles"]) == ["CANTANTE", "DIRECTOR"]

    async def test_wrong_password(self, client, make_user):
        await make_user("tenor")

        response = await client.post("/api/auth/login", json={"login": "tenor", "password": "wrong"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid credentials"

    async def test_unknown_user(self, client):
        response = await client.post("/api/auth/login", json={"login": "ghost", "password": "secret123"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid credentials"

    async def test_inactive_user_cannot_login(self, client, make_user):
        await make_user("tenor", is_active=False)

        response = await client.post("/api/auth/login", json={"login": "tenor", "password": "secret123"})

        assert response.status_code == 400


class TestVerify:
    async def test_verify_returns_user(self, client, make_user):
        user, headers = await make_user("tenor")

        response = await client.get("/api/auth/verify", headers=headers)

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    async def test_me_matches_verify(self, client, make_user):
        user, headers = await make_user("tenor")

        response = await client.get("/api/auth/me", headers=headers)

        assert response.json()["user"]["username"] == "tenor"

    async def test_verify_without_token(self, client):
        response = await client.get("/api/auth/verify")

        assert response.status_code == 401

    async def test_login_token_is_accepted(self, client, make_user):
        await make_user("tenor")
        login = await client.post("/api/auth/login", json={"login": "tenor", "password": "secret123"})

        response = await client.get(
            "/api/auth/verify", headers={"Authorization": f"Bearer {login.json()['token']}"}
        )

        assert response.status_code == 200
