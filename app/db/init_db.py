"""
Database initialization.

Creates all tables and seeds the built-in exercise catalog.  Production
schemas are managed by Alembic; this is for local and test databases.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel

from app.db import base  # noqa: F401  (registers every table on SQLModel.metadata)
from app.db.exercise_catalog import EXERCISE_CATALOG
from app.db.repositories.exercise import ExerciseRepository
from app.models.exercise import Exercise

logger = logging.getLogger(__name__)


def seed_exercises(session: Session) -> int:
    """Insert catalog exercises that are not in the table yet.  Returns how many were added."""
    repository = ExerciseRepository(session)
    added = 0
    for info in EXERCISE_CATALOG.values():
        if repository.get_by_slug(info.exercise_id) is not None:
            continue
        repository.create(Exercise(slug=info.exercise_id, name=info.name, category=info.category.value,
                                   equipment=info.equipment.value, default_rest_seconds=info.default_rest_seconds))
        added += 1
    return added


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialize database schema.

    - Creates all SQLModel tables
    - Seeds the exercise catalog
    """
    if engine is None:
        from app.db.session import engine

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        added = seed_exercises(session)
    logger.info("Database initialization complete (%d exercises seeded)", added)


if __name__ == "__main__":
    init_db()
