"""
Quizo Backend — Authentication Route
=====================================

POST /api/auth/login checks credentials and answers 200 or 401.

No token, session or cookie is issued: a successful login changes nothing
on the server, and the quiz endpoints do not check who is calling.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import AuthError
from app.schemas.auth import LoginRequest
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={
        400: {"description": "Username or password missing", "model": ErrorResponse},
        401: {"description": "Credentials did not match", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log a teacher in",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Verify a username/password pair.

    The 401 response is identical for an unknown username and a wrong
    password.
    """
    user = await auth_service.verify(db, payload.username, payload.password)
    if user is None:
        raise AuthError()

    return MessageResponse(message="Login successful.")
