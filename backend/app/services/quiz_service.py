"""
Quizo Backend — Quiz Service (Repository)
==========================================

What:  CRUD operations over quiz records, scoped by teacher identity.
Why:   Keeps SQL out of the route handlers; routes only map outcomes to HTTP.
How:   Every operation is exactly one parameterized statement executed
       through the persistence gateway (app.database.execute).
Who:   Called by the /api/quizzes route handlers.

Trust boundary:
    The service trusts its caller. Non-empty titles/descriptions and
    positive ids are guaranteed by the request schemas and path/query
    validation in the routes, so nothing is re-checked here.

Statements:
    create           INSERT ... RETURNING *
    list_by_teacher  SELECT ... WHERE teacher_id = :t ORDER BY created_at DESC
    get_by_id        SELECT ... WHERE id = :id LIMIT 1
    update           UPDATE ... SET title, description WHERE id = :id RETURNING *
    delete           DELETE ... WHERE id = :id RETURNING id
"""

import logging
from typing import List

from sqlalchemy import delete, desc, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import execute
from app.exceptions import NotFoundError
from app.models.quiz import Quiz
from app.schemas.quiz import QuizResponse

logger = logging.getLogger(__name__)


class QuizService:
    """
    Stateless quiz repository.

    Responsibilities:
        - create(): insert and return the stored record
        - list_by_teacher(): one teacher's quizzes, newest first
        - get_by_id(): single lookup with not-found handling
        - update(): replace title/description only
        - delete(): physical delete, reporting whether a row existed
    """

    async def create(
        self,
        db: AsyncSession,
        title: str,
        description: str,
        teacher_id: int,
    ) -> QuizResponse:
        """
        Insert a quiz and return it with its store-assigned id and timestamp.
        """
        result = await execute(
            db,
            insert(Quiz)
            .values(title=title, description=description, teacher_id=teacher_id)
            .returning(Quiz),
        )
        quiz = result.scalar_one()
        logger.info("Quiz %s created for teacher %s", quiz.id, teacher_id)
        return QuizResponse.model_validate(quiz)

    async def list_by_teacher(
        self, db: AsyncSession, teacher_id: int
    ) -> List[QuizResponse]:
        """
        All quizzes owned by a teacher, most recent first.

        An empty list (not an error) when the teacher owns none. Ties on
        created_at fall back to id so ordering is stable.
        """
        result = await execute(
            db,
            select(Quiz)
            .where(Quiz.teacher_id == teacher_id)
            .order_by(desc(Quiz.created_at), desc(Quiz.id)),
        )
        return [QuizResponse.model_validate(q) for q in result.scalars().all()]

    async def get_by_id(self, db: AsyncSession, quiz_id: int) -> QuizResponse:
        """
        Retrieve a single quiz by id.

        Raises:
            NotFoundError: No quiz has this id (→ 404)
        """
        result = await execute(
            db, select(Quiz).where(Quiz.id == quiz_id).limit(1)
        )
        quiz = result.scalar_one_or_none()
        if quiz is None:
            raise NotFoundError(resource="Quiz", resource_id=quiz_id)
        return QuizResponse.model_validate(quiz)

    async def update(
        self,
        db: AsyncSession,
        quiz_id: int,
        title: str,
        description: str,
    ) -> QuizResponse:
        """
        Replace a quiz's title and description; teacher_id and created_at
        are left untouched.

        Raises:
            NotFoundError: No quiz has this id (→ 404)
        """
        result = await execute(
            db,
            update(Quiz)
            .where(Quiz.id == quiz_id)
            .values(title=title, description=description)
            .returning(Quiz),
        )
        quiz = result.scalar_one_or_none()
        if quiz is None:
            raise NotFoundError(resource="Quiz", resource_id=quiz_id)
        logger.info("Quiz %s updated", quiz_id)
        return QuizResponse.model_validate(quiz)

    async def delete(self, db: AsyncSession, quiz_id: int) -> bool:
        """
        Physically delete a quiz.

        Returns:
            True if a row existed and was removed, False if nothing matched.
            A second delete of the same id therefore returns False.
        """
        result = await execute(
            db, delete(Quiz).where(Quiz.id == quiz_id).returning(Quiz.id)
        )
        deleted = result.scalar_one_or_none() is not None
        if deleted:
            logger.info("Quiz %s deleted", quiz_id)
        return deleted


# ── Singleton Instance ────────────────────────────────────────────────────
# Why singleton: QuizService is stateless; no per-instance state needed
quiz_service = QuizService()
