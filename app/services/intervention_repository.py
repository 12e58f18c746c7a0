"""
Intervention Repository
Participant lookups, per-intervention locking and schedule updates
"""

from datetime import date, datetime, time, timezone
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from app.models.intervention import Intervention, InterventionAssignment, STATUS_SCHEDULED
from app.models.user import User, ROLE_MANAGER, ROLE_ADMIN
from app.services.errors import InterventionNotFound, UserNotFound

logger = structlog.get_logger(__name__)


class InterventionRepository:
    """
    Read/write access to the intervention rows the matcher depends on.

    The caller owns the transaction; nothing here commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, intervention_id: str) -> Intervention:
        intervention = self.db.query(Intervention).filter(
            Intervention.id == intervention_id
        ).first()
        if intervention is None:
            raise InterventionNotFound(intervention_id)
        return intervention

    def lock(self, intervention_id: str) -> Intervention:
        """
        Take a row-level lock on the intervention (SELECT ... FOR UPDATE).

        Held until the surrounding transaction ends, so concurrent
        submissions for one intervention run one after the other.
        """
        intervention = self.db.query(Intervention).filter(
            Intervention.id == intervention_id
        ).with_for_update().first()
        if intervention is None:
            raise InterventionNotFound(intervention_id)
        logger.debug("intervention_locked", intervention_id=intervention_id)
        return intervention

    def get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise UserNotFound(user_id)
        return user

    def is_assigned(self, intervention: Intervention, user_id: str) -> bool:
        return self.db.query(InterventionAssignment).filter(
            InterventionAssignment.intervention_id == intervention.id,
            InterventionAssignment.user_id == user_id,
        ).first() is not None

    def is_participant(self, intervention: Intervention, user: User) -> bool:
        """Tenant of the intervention, assigned contact, or manager/admin."""
        return (
            intervention.tenant_id == user.id
            or self.is_assigned(intervention, user.id)
            or user.role in (ROLE_MANAGER, ROLE_ADMIN)
        )

    def update_intervention_schedule(
        self,
        intervention_id: str,
        scheduled_date: date,
        scheduled_time: time,
        comment: Optional[str] = None,
    ) -> Intervention:
        """Move the intervention to 'planifiee' with the given date and start time."""
        intervention = self.get(intervention_id)
        previous_status = intervention.status

        intervention.status = STATUS_SCHEDULED
        intervention.scheduled_date = scheduled_date
        intervention.scheduled_time = scheduled_time
        intervention.updated_at = datetime.now(timezone.utc)
        if comment:
            existing = intervention.manager_comment or ""
            intervention.manager_comment = existing + (" | " if existing else "") + comment

        self.db.flush()

        logger.info("intervention_scheduled",
                    intervention_id=intervention_id,
                    previous_status=previous_status,
                    scheduled_date=scheduled_date.isoformat(),
                    scheduled_time=scheduled_time.strftime("%H:%M"))
        return intervention
