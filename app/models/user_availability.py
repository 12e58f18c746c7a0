"""
UserAvailability Model
Free time blocks declared by participants for one intervention
"""

import uuid

from sqlalchemy import Column, String, DateTime, Date, Time, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class UserAvailability(Base):
    """
    One declared block of free time for one participant on one intervention.

    The whole set for a (user, intervention) pair is replaced on every
    submission; rows are never updated in place.
    """
    __tablename__ = "user_availabilities"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    intervention_id = Column(String(36), ForeignKey("interventions.id"), nullable=False, index=True)

    # Naive local date and minute-resolution times
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", lazy="joined")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_user_availability_time_order"),
        Index("idx_user_availabilities_lookup", "intervention_id", "user_id"),
    )

    def __repr__(self):
        return (
            f"<UserAvailability(user_id={self.user_id}, date={self.date}, "
            f"{self.start_time}-{self.end_time})>"
        )
