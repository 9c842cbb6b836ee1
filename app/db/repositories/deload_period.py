"""
Deload period repository.

``create`` relies on the partial unique index over active rows: when a
concurrent request already inserted an active period the insert fails
with an :class:`~sqlalchemy.exc.IntegrityError`, which is re-raised as
:class:`~app.core.exceptions.ConflictError`.
"""

import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.exceptions import ConflictError
from app.models.deload_period import DeloadPeriod


class DeloadPeriodRepository:
    """Repository for DeloadPeriod database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, period: DeloadPeriod) -> DeloadPeriod:
        self.session.add(period)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError(
                f"User {period.user_id} already has an active deload period"
            ) from exc
        self.session.refresh(period)
        return period

    def get_by_id(self, period_id: int) -> Optional[DeloadPeriod]:
        return self.session.get(DeloadPeriod, period_id)

    def get_active(self, user_id: int) -> Optional[DeloadPeriod]:
        statement = select(DeloadPeriod).where(
            DeloadPeriod.user_id == user_id,
            DeloadPeriod.is_active == True,  # noqa: E712
        )
        return self.session.exec(statement).first()

    def get_latest(self, user_id: int) -> Optional[DeloadPeriod]:
        """Most recently started period, active or not."""
        statement = (
            select(DeloadPeriod)
            .where(DeloadPeriod.user_id == user_id)
            .order_by(DeloadPeriod.start_date.desc(), DeloadPeriod.id.desc())
            .limit(1)
        )
        return self.session.exec(statement).first()

    def get_by_user(self, user_id: int, limit: int = 10) -> list[DeloadPeriod]:
        statement = (
            select(DeloadPeriod)
            .where(DeloadPeriod.user_id == user_id)
            .order_by(DeloadPeriod.start_date.desc(), DeloadPeriod.id.desc())
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def deactivate(self, period: DeloadPeriod, ended_on: datetime.date) -> DeloadPeriod:
        period.is_active = False
        period.ended_on = ended_on
        self.session.add(period)
        self.session.commit()
        self.session.refresh(period)
        return period
