"""
Intervention Model
Work orders whose scheduling is driven by availability matching
"""

import uuid

from sqlalchemy import Column, String, DateTime, Date, Time, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


# Lifecycle states touched by scheduling
STATUS_APPROVED = "approuvee"
STATUS_PLANNING = "planification"
STATUS_SCHEDULED = "planifiee"

# States in which a slot may be (re)selected manually
SLOT_SELECTABLE_STATUSES = (STATUS_PLANNING, STATUS_APPROVED, STATUS_SCHEDULED)


class Intervention(Base):
    """
    On-site intervention coordinated between a tenant and providers.

    The matcher only reads participants and writes the schedule:
    status -> 'planifiee' together with scheduled_date / scheduled_time.
    """
    __tablename__ = "interventions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default=STATUS_PLANNING, index=True)

    tenant_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    # Schedule (populated on perfect match or manual selection)
    scheduled_date = Column(Date, nullable=True)
    scheduled_time = Column(Time, nullable=True)

    manager_comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    assignments = relationship(
        "InterventionAssignment",
        back_populates="intervention",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Intervention(id={self.id}, status='{self.status}')>"


class InterventionAssignment(Base):
    """Provider or manager assigned to an intervention."""
    __tablename__ = "intervention_assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    intervention_id = Column(String(36), ForeignKey("interventions.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(20), nullable=True)  # prestataire, gestionnaire

    intervention = relationship("Intervention", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("intervention_id", "user_id", name="uq_intervention_assignment"),
    )
