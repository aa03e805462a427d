"""
Quizo Backend — Auth Service Unit Tests
========================================

What:  Tests for AuthService.verify() against the SQLite test store.
Why:   Login must match username AND password exactly, and must not
       distinguish an unknown user from a wrong password.
"""

import pytest

from app.models.user import User
from app.services.auth_service import AuthService


class TestAuthServiceVerify:
    """Tests for credential verification."""

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_verify_correct_credentials(self, db_session, seed_user):
        user = await self.service.verify(db_session, seed_user["username"], seed_user["password"])

        assert user is not None
        assert user.id == seed_user["id"]
        assert user.username == seed_user["username"]

    @pytest.mark.asyncio
    async def test_verify_wrong_password(self, db_session, seed_user):
        assert await self.service.verify(db_session, seed_user["username"], "nope") is None

    @pytest.mark.asyncio
    async def test_verify_unknown_username(self, db_session, seed_user):
        assert await self.service.verify(db_session, "nobody", seed_user["password"]) is None

    @pytest.mark.asyncio
    async def test_verify_is_exact_match(self, db_session, seed_user):
        """No case folding or trimming: the stored value must match byte for byte."""
        assert await self.service.verify(
            db_session, seed_user["username"].upper(), seed_user["password"]
        ) is None
        assert await self.service.verify(
            db_session, seed_user["username"], seed_user["password"] + " "
        ) is None

    @pytest.mark.asyncio
    async def test_verify_does_not_mix_users(self, db_session, seed_user):
        """One user's password does not unlock another user's name."""
        db_session.add(User(username="mr.keating", password="carpe-diem"))
        await db_session.commit()

        assert await self.service.verify(db_session, "mr.keating", seed_user["password"]) is None
        other = await self.service.verify(db_session, "mr.keating", "carpe-diem")
        assert other is not None and other.username == "mr.keating"
