"""
Fatigue log repository.

One row per user per day: :meth:`upsert` updates the existing row for
the date instead of inserting a second one.  An insert that loses a race
against ``uq_fatigue_user_date`` is retried as an update.
"""

import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.fatigue_log import FatigueLog


class FatigueLogRepository:
    """Repository for FatigueLog database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_user_and_date(self, user_id: int, date: datetime.date) -> Optional[FatigueLog]:
        statement = select(FatigueLog).where(
            FatigueLog.user_id == user_id,
            FatigueLog.date == date,
        )
        return self.session.exec(statement).first()

    def get_by_user_date_range(
        self, user_id: int, start: datetime.date, end: Optional[datetime.date] = None,
    ) -> list[FatigueLog]:
        """Log rows within a date range (inclusive), newest first."""
        statement = select(FatigueLog).where(
            FatigueLog.user_id == user_id,
            FatigueLog.date >= start,
        )
        if end is not None:
            statement = statement.where(FatigueLog.date <= end)
        statement = statement.order_by(FatigueLog.date.desc())
        return list(self.session.exec(statement).all())

    def upsert(self, entry: FatigueLog) -> tuple[FatigueLog, bool]:
        """Insert or overwrite the row for ``(entry.user_id, entry.date)``.

        Returns:
            Tuple of (row, created) where created is True if new row.
        """
        existing = self.get_by_user_and_date(entry.user_id, entry.date)
        if existing:
            return self._overwrite(existing, entry), False

        self.session.add(entry)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = self.get_by_user_and_date(entry.user_id, entry.date)
            if existing is None:
                raise
            return self._overwrite(existing, entry), False
        self.session.refresh(entry)
        return entry, True

    def _overwrite(self, existing: FatigueLog, entry: FatigueLog) -> FatigueLog:
        existing.score = entry.score
        existing.level = entry.level
        existing.rpe_creep = entry.rpe_creep
        existing.performance_drop = entry.performance_drop
        existing.recovery_debt = entry.recovery_debt
        existing.volume_load = entry.volume_load
        existing.streak = entry.streak
        existing.recommendations = list(entry.recommendations)
        existing.updated_at = datetime.datetime.utcnow()
        self.session.add(existing)
        self.session.commit()
        self.session.refresh(existing)
        return existing
