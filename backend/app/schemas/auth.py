"""
Quizo Backend — Authentication Schemas
=======================================

Body of POST /api/auth/login. Both fields are required and non-empty;
nothing is trimmed or normalized, so the stored value must match exactly.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, description="Login name")
    password: str = Field(min_length=1, description="Plaintext password")
