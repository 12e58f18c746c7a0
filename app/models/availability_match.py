"""
AvailabilityMatch Model
Stores the candidate matches computed for an intervention
"""

import uuid

from sqlalchemy import Column, String, Integer, DateTime, Date, Time, ForeignKey, Boolean, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from app.database import Base


class AvailabilityMatch(Base):
    """
    One stored tenant/provider overlap for an intervention.

    The set for an intervention is always cleared and re-inserted as a whole
    after each matching run; rank 1 is the best candidate.
    """
    __tablename__ = "availability_matches"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    intervention_id = Column(String(36), ForeignKey("interventions.id"), nullable=False, index=True)

    matched_date = Column(Date, nullable=False, index=True)
    matched_start_time = Column(Time, nullable=False)
    matched_end_time = Column(Time, nullable=False)
    overlap_duration = Column(Integer, nullable=False)  # minutes

    # [tenant_id, provider_id]
    participant_user_ids = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)

    match_score = Column(Integer, nullable=False)  # 0-100
    tier = Column(String(20), nullable=False)  # perfect, partial, suggestion
    rank = Column(Integer, nullable=False)
    is_perfect = Column(Boolean, default=False, nullable=False)

    calculated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return (
            f"<AvailabilityMatch(intervention_id={self.intervention_id}, "
            f"date={self.matched_date}, score={self.match_score}, tier='{self.tier}')>"
        )
