"""
Quizo Backend — Quiz Route Handlers
====================================

What:  CRUD endpoints for quizzes under /api/quizzes.
How:   Bodies are validated by the schemas in app.schemas.quiz; numeric ids
       arriving as path/query strings are coerced by the dependencies below.
       Each handler then makes one QuizService call.

Authorization gap:
    Any caller may pass any teacher_id or quiz id; nothing ties the request
    to the teacher who logged in. This is the current contract.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import NotFoundError, ValidationError
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.quiz import MAX_ID, QuizCreate, QuizResponse, QuizUpdate
from app.services.quiz_service import quiz_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quizzes", tags=["Quizzes"])


# ── Identifier Coercion ───────────────────────────────────────────────────

def parse_positive_id(raw: Optional[str], message: str, field: str) -> int:
    """
    Convert a transport-level id string to a positive int.

    Only plain ASCII digit strings are accepted: int() alone would also take
    "1_0", " 7 " and non-ASCII digits. Missing, non-numeric, zero and values
    past MAX_ID all raise ValidationError with the caller's message.
    """
    if raw is None:
        raise ValidationError(message=message, field=field)
    if not (raw.isascii() and raw.isdigit()):
        raise ValidationError(message=message, field=field, context={"value": raw})
    value = int(raw)
    if not 0 < value <= MAX_ID:
        raise ValidationError(message=message, field=field, context={"value": raw})
    return value


def quiz_id_path(quiz_id: str = Path(description="Quiz id")) -> int:
    return parse_positive_id(quiz_id, "Invalid quiz ID.", "id")


def teacher_id_query(
    teacher_id: Optional[str] = Query(default=None, description="Owning teacher's user id"),
) -> int:
    return parse_positive_id(teacher_id, "teacher_id is required.", "teacher_id")


# ── Endpoints ─────────────────────────────────────────────────────────────

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=QuizResponse,
    responses={
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a quiz",
)
async def create_quiz(
    payload: QuizCreate,
    db: AsyncSession = Depends(get_db_session),
) -> QuizResponse:
    return await quiz_service.create(
        db,
        title=payload.title,
        description=payload.description,
        teacher_id=payload.teacher_id,
    )


@router.get(
    "",
    response_model=List[QuizResponse],
    responses={
        400: {"description": "teacher_id missing or invalid", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List one teacher's quizzes, newest first",
)
async def list_quizzes(
    teacher_id: int = Depends(teacher_id_query),
    db: AsyncSession = Depends(get_db_session),
) -> List[QuizResponse]:
    """An empty array (200) when the teacher owns no quizzes."""
    return await quiz_service.list_by_teacher(db, teacher_id)


@router.get(
    "/{quiz_id}",
    response_model=QuizResponse,
    responses={
        400: {"description": "Invalid quiz id", "model": ErrorResponse},
        404: {"description": "Quiz not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single quiz",
)
async def get_quiz(
    quiz_id: int = Depends(quiz_id_path),
    db: AsyncSession = Depends(get_db_session),
) -> QuizResponse:
    return await quiz_service.get_by_id(db, quiz_id)


@router.put(
    "/{quiz_id}",
    response_model=QuizResponse,
    responses={
        400: {"description": "Invalid id or missing fields", "model": ErrorResponse},
        404: {"description": "Quiz not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a quiz's title and description",
)
async def update_quiz(
    payload: QuizUpdate,
    quiz_id: int = Depends(quiz_id_path),
    db: AsyncSession = Depends(get_db_session),
) -> QuizResponse:
    return await quiz_service.update(
        db,
        quiz_id,
        title=payload.title,
        description=payload.description,
    )


@router.delete(
    "/{quiz_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid quiz id", "model": ErrorResponse},
        404: {"description": "Quiz not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a quiz",
)
async def delete_quiz(
    quiz_id: int = Depends(quiz_id_path),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Deleting an id that no longer exists is a 404, not a silent success."""
    if not await quiz_service.delete(db, quiz_id):
        raise NotFoundError(resource="Quiz", resource_id=quiz_id)
    return MessageResponse(message="Quiz deleted successfully.")
