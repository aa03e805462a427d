"""
Quizo Backend — Quiz Request/Response Schemas
==============================================

What:  Pydantic models defining the quiz API contract.
Why:   Every request body is validated at the HTTP boundary before a handler
       runs; invalid input never reaches the database.
How:   FastAPI validates request bodies against these models. Failures raise
       RequestValidationError, which main.py turns into a 400 response.

Schemas are separate from the SQLAlchemy model so the API contract can
change independently of the table.
"""

from datetime import datetime

from pydantic import BaseModel, Field

# Largest value the INTEGER id columns hold (signed 32-bit)
MAX_ID = 2_147_483_647


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QuizCreate(BaseModel):
    """
    Body of POST /api/quizzes.

    teacher_id accepts a JSON number or a numeric string ("7"); zero and
    negative values are rejected.
    """
    title: str = Field(min_length=1, max_length=255, description="Quiz title")
    description: str = Field(min_length=1, description="Quiz description")
    teacher_id: int = Field(gt=0, le=MAX_ID, description="Owning teacher's user id")


class QuizUpdate(BaseModel):
    """Body of PUT /api/quizzes/{id}. Ownership cannot be changed."""
    title: str = Field(min_length=1, max_length=255, description="New quiz title")
    description: str = Field(min_length=1, description="New quiz description")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class QuizResponse(BaseModel):
    """
    What:  Full representation of a stored quiz.
    Who:   Returned by create, get, list and update.
    """
    id: int = Field(description="Store-assigned quiz id")
    title: str = Field(description="Quiz title")
    description: str = Field(description="Quiz description")
    teacher_id: int = Field(description="Owning teacher's user id")
    created_at: datetime = Field(description="Creation timestamp (ISO 8601)")

    model_config = {"from_attributes": True}
