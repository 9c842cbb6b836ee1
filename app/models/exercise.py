"""
Exercise database model.

Exercises are shared reference data.  ``slug`` is the stable id used by
the engine and the API; ``category`` and ``equipment`` drive the
progression increments and weight rounding.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class Exercise(SQLModel, table=True):
    """A lift that sets can be logged against."""

    __tablename__ = "exercises"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(unique=True, index=True, max_length=100, nullable=False)
    name: str = Field(nullable=False, max_length=255)

    # "compound" | "isolation"
    category: str = Field(nullable=False, max_length=20)
    # "barbell" | "dumbbell" | "machine" | "cable" | "kettlebell" | "bodyweight"
    equipment: str = Field(nullable=False, max_length=20)

    default_rest_seconds: int = Field(default=120, nullable=False)
