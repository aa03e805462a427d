"""
Quizo Backend — Login Endpoint Tests
=====================================

What:  HTTP-level tests for POST /api/auth/login.
"""

import pytest


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, seed_user):
        response = await test_client.post(
            "/api/auth/login",
            json={"username": seed_user["username"], "password": seed_user["password"]},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Login successful."}
        # No session state is issued
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, test_client, seed_user):
        """The 401 body never reveals whether the username exists."""
        wrong_password = await test_client.post(
            "/api/auth/login",
            json={"username": seed_user["username"], "password": "wrong"},
        )
        unknown_user = await test_client.post(
            "/api/auth/login",
            json={"username": "ghost", "password": "wrong"},
        )

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json()["message"] == unknown_user.json()["message"] == "Invalid credentials."

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"username": "ms.frizzle"},
            {"password": "magic-school-bus"},
            {"username": "", "password": "magic-school-bus"},
            {},
        ],
    )
    async def test_missing_fields_are_400(self, test_client, seed_user, body):
        response = await test_client.post("/api/auth/login", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_password_not_echoed_in_validation_error(self, test_client, seed_user):
        response = await test_client.post(
            "/api/auth/login", json={"username": "", "password": "hunter2-secret"}
        )

        assert response.status_code == 400
        assert "hunter2-secret" not in response.text
