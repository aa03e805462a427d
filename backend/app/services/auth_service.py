"""
Quizo Backend — Auth Service (Credential Verifier)
===================================================

What:  Checks a username/password pair against the users table.
Who:   Called by POST /api/auth/login.

Security Note:
    Passwords are compared in plaintext inside the SQL WHERE clause, exactly
    as stored: no hashing, no normalization, no constant-time comparison.
    This is a known gap to be closed with a salted slow hash (e.g. argon2)
    once commissioned; it is intentionally not papered over here.

    Because username and password are matched in a single query, an unknown
    username and a wrong password are indistinguishable to the caller.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import execute
from app.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless credential verifier."""

    async def verify(
        self,
        db: AsyncSession,
        username: str,
        password: str,
    ) -> Optional[User]:
        """
        Find the user whose username and password both match exactly.

        Returns:
            The matching User, or None when nothing matches.
            Usernames are unique, so at most one row is expected; should the
            store ever hold duplicates, the first row in store order wins.

        Raises:
            StoreUnavailableError / DatabaseError from the gateway
        """
        result = await execute(
            db,
            select(User)
            .where(User.username == username, User.password == password)
            .limit(1),
        )
        user = result.scalars().first()

        if user is None:
            # Username deliberately omitted: failed attempts may carry a
            # password typed into the username field
            logger.info("Login rejected: credentials did not match")
            return None

        logger.info("Login accepted for user %s", user.id)
        return user


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
