"""
Recovery check-in repository.
"""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.recovery import RecoveryCheckIn


class RecoveryRepository:
    """Repository for RecoveryCheckIn database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: RecoveryCheckIn) -> RecoveryCheckIn:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_user_date_range(
        self, user_id: int, start: datetime.date, end: Optional[datetime.date] = None,
    ) -> list[RecoveryCheckIn]:
        """Check-ins for a user within a date range (inclusive), newest first."""
        statement = select(RecoveryCheckIn).where(
            RecoveryCheckIn.user_id == user_id,
            RecoveryCheckIn.date >= start,
        )
        if end is not None:
            statement = statement.where(RecoveryCheckIn.date <= end)
        statement = statement.order_by(RecoveryCheckIn.date.desc(), RecoveryCheckIn.id.desc())
        return list(self.session.exec(statement).all())
