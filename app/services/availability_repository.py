"""
Availability Repository
Full-replace storage of participant availabilities
"""

from typing import Iterable, List, Optional

import structlog
from sqlalchemy.orm import Session

from app.models.user import User, ROLE_TENANT, ROLE_PROVIDER
from app.models.user_availability import UserAvailability
from app.services.availability_matching_engine import AvailabilitySlot
from app.services.matching import minutes_to_time, parse_hhmm

logger = structlog.get_logger(__name__)

# Matching role -> account role
ROLE_FILTERS = {
    "tenant": ROLE_TENANT,
    "provider": ROLE_PROVIDER,
}


class AvailabilityRepository:
    """
    Availability rows for (user, intervention) pairs.

    A submission always replaces the whole prior set for the pair; there is
    no partial update. The caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def replace_availabilities(
        self,
        user_id: str,
        intervention_id: str,
        slots: Iterable,
    ) -> List[UserAvailability]:
        """
        Delete the user's rows for the intervention and insert the new set.

        Args:
            user_id: Declaring participant
            intervention_id: Intervention the slots belong to
            slots: Objects exposing date, start_time and end_time

        Returns:
            The inserted rows (flushed, not committed)
        """
        deleted = self.db.query(UserAvailability).filter(
            UserAvailability.user_id == user_id,
            UserAvailability.intervention_id == intervention_id,
        ).delete(synchronize_session=False)

        rows = [
            UserAvailability(
                user_id=user_id,
                intervention_id=intervention_id,
                date=slot.date,
                start_time=minutes_to_time(parse_hhmm(slot.start_time)),
                end_time=minutes_to_time(parse_hhmm(slot.end_time)),
            )
            for slot in slots
        ]
        self.db.add_all(rows)
        self.db.flush()

        logger.info("availabilities_replaced",
                    user_id=user_id,
                    intervention_id=intervention_id,
                    deleted=deleted,
                    inserted=len(rows))
        return rows

    def list_availabilities(
        self,
        intervention_id: str,
        role: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> List[UserAvailability]:
        """
        Rows for an intervention ordered by date, start time and user.

        Args:
            intervention_id: Intervention to read
            role: Optional "tenant" or "provider", resolved from the account
                role at query time
            user_id: Optional restriction to one participant
        """
        query = self.db.query(UserAvailability).join(
            User, User.id == UserAvailability.user_id
        ).filter(UserAvailability.intervention_id == intervention_id)

        if role is not None:
            if role not in ROLE_FILTERS:
                raise ValueError(f"Unknown availability role: {role!r}")
            query = query.filter(User.role == ROLE_FILTERS[role])
        if user_id is not None:
            query = query.filter(UserAvailability.user_id == user_id)

        return query.order_by(
            UserAvailability.date.asc(),
            UserAvailability.start_time.asc(),
            UserAvailability.user_id.asc(),
        ).all()

    def list_slots(self, intervention_id: str, role: str) -> List[AvailabilitySlot]:
        """Engine-ready slots for one side of the match."""
        return [
            AvailabilitySlot.from_model(row, role=role)
            for row in self.list_availabilities(intervention_id, role=role)
        ]
