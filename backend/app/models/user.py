"""
Quizo Backend — User SQLAlchemy Model
======================================

What:  ORM model for the `users` table.
Who:   Read by the credential verifier (services/auth_service.py).

Users are provisioned out-of-band; this service never inserts, updates or
deletes them. `password` is stored and compared in plaintext, a known
weakness kept as-is until hashing is commissioned.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """A teacher account that can log in."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login name, unique across users",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Plaintext password (no hashing yet)",
    )

    def __repr__(self) -> str:
        # Never include the password
        return f"<User(id={self.id}, username='{self.username}')>"
