"""
Integration Tests: Account & Authentication Gate

Registration, login, logout and every way a request can fail the gate.
"""

import pytest
from httpx import AsyncClient

TRACKS = "/api/v1/tracks"


# =============================================================================
# Accounts
# =============================================================================

class TestAccounts:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_register_hides_secrets(self, client: AsyncClient):
        res = await client.post(
            "/api/v1/users/register",
            json={"email": "rider@example.com", "password": "correct-horse"},
        )

        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["email"] == "rider@example.com"
        assert set(body["user"]) == {"id", "email", "createdAt"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_register_does_not_create_namespace(self, client: AsyncClient, app):
        await client.post(
            "/api/v1/users/register",
            json={"email": "rider@example.com", "password": "correct-horse"},
        )

        root = app.state.context.storage.root
        assert not root.exists() or list(root.iterdir()) == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient):
        payload = {"email": "rider@example.com", "password": "correct-horse"}
        await client.post("/api/v1/users/register", json=payload)

        res = await client.post(
            "/api/v1/users/register",
            json={"email": "RIDER@example.com", "password": "other-password"},
        )

        assert res.status_code == 409
        assert res.json()["detail"] == "Email already registered"

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "not-an-email", "password": "correct-horse"},
            {"email": "rider@example.com", "password": "short"},
            {"email": "rider@example.com"},
        ],
    )
    async def test_register_validation(self, client: AsyncClient, payload):
        res = await client.post("/api/v1/users/register", json=payload)
        assert res.status_code == 422

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_login_returns_usable_token(self, client: AsyncClient, make_user):
        headers = await make_user()

        res = await client.get("/api/v1/users/me", headers=headers)

        assert res.status_code == 200
        assert res.json()["email"] == "rider@example.com"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_login_failures_look_alike(self, client: AsyncClient, make_user):
        await make_user()

        wrong_password = await client.post(
            "/api/v1/users/login",
            json={"email": "rider@example.com", "password": "wrong-password"},
        )
        unknown_email = await client.post(
            "/api/v1/users/login",
            json={"email": "nobody@example.com", "password": "correct-horse"},
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {
            "detail": "Invalid email or password"
        }

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_logout(self, client: AsyncClient):
        res = await client.post("/api/v1/users/logout")

        assert res.status_code == 200
        assert res.json() == {"message": "Logout successful"}


# =============================================================================
# Authentication Gate
# =============================================================================

class TestAuthenticationGate:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_missing_credential(self, client: AsyncClient):
        res = await client.get(f"{TRACKS}/count")

        assert res.status_code == 401
        assert res.json() == {"detail": "Unauthorized"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "header", ["Token abc", "Bearer", "Bearer not-a-jwt", "Basic dXNlcjpwYXNz"]
    )
    async def test_malformed_credential(self, client: AsyncClient, header):
        res = await client.get(f"{TRACKS}/count", headers={"Authorization": header})

        assert res.status_code == 401
        assert res.json() == {"detail": "Unauthorized"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_expired_credential(self, client: AsyncClient, app, make_user):
        headers = await make_user()
        me = (await client.get("/api/v1/users/me", headers=headers)).json()

        tokens = app.state.context.tokens
        old = tokens.issue(me["id"], now=1_000_000)
        res = await client.get(f"{TRACKS}/count", headers={"Authorization": f"Bearer {old}"})

        assert res.status_code == 401

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_forged_credential(self, client: AsyncClient, make_user):
        headers = await make_user()
        header, payload, signature = headers["Authorization"].split(".")
        forged = f"{header}.{payload}.{signature[::-1]}"

        res = await client.get(f"{TRACKS}/count", headers={"Authorization": forged})

        assert res.status_code == 401

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_deleted_identity(self, client: AsyncClient, app, make_user):
        headers = await make_user()
        me = (await client.get("/api/v1/users/me", headers=headers)).json()

        await app.state.context.users.delete(me["id"])
        res = await client.get(f"{TRACKS}/count", headers=headers)

        assert res.status_code == 401
        assert res.json() == {"detail": "Unauthorized"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_every_track_route_is_gated(self, client: AsyncClient):
        calls = [
            client.post(TRACKS, files={"file": ("a.gpx", b"<gpx/>")}),
            client.get(TRACKS),
            client.get(f"{TRACKS}/count"),
            client.get(f"{TRACKS}/0"),
            client.get(f"{TRACKS}/by-id/1"),
            client.get(f"{TRACKS}/a.gpx/download"),
            client.delete(f"{TRACKS}/a.gpx"),
        ]
        for call in calls:
            res = await call
            assert res.status_code == 401, res.request.url
