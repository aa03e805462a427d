"""
Quizo Backend — Quiz SQLAlchemy Model
======================================

What:  ORM model representing the `quizzes` table.
Who:   Used by QuizService for CRUD operations.

Table Design:
    - Integer identity primary key assigned by the store
    - teacher_id: owning teacher; set at creation and never reassigned
    - created_at: UTC, set at insert (Python default plus server default so
      rows inserted by other tools also get a timestamp)

    Index on (teacher_id, created_at):
        Serves the only list query: one teacher's quizzes, newest first.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Quiz(Base):
    """
    A titled, described unit of assessment owned by one teacher.

    Lifecycle:
        1. Created by POST /api/quizzes
        2. Title/description replaced by PUT /api/quizzes/{id}
        3. Physically deleted by DELETE /api/quizzes/{id} (no soft delete)
    """

    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Plain integer rather than a ForeignKey: teacher ids are trusted as given
    # and the users table is owned by another system
    teacher_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Owning teacher (users.id)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this quiz was created (UTC)",
    )

    __table_args__ = (
        Index("idx_quizzes_teacher_created", teacher_id, created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Quiz(id={self.id}, teacher_id={self.teacher_id}, "
            f"title='{self.title}')>"
        )
