"""
Manual Slot Selection

Lets a participant pick a slot directly (for example one of the partial
matches after manual validation) and schedules the intervention on it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from app.models.intervention import Intervention, SLOT_SELECTABLE_STATUSES, STATUS_SCHEDULED
from app.services.availability_repository import AvailabilityRepository
from app.services.errors import InvalidInterventionStatus, ParticipantAccessDenied
from app.services.intervention_repository import InterventionRepository
from app.services.match_persistence import MatchPersistenceGateway
from app.services.matching import TimeInterval, minutes_to_time
from app.services.monitoring.error_tracking import set_matching_context

logger = structlog.get_logger(__name__)


@dataclass
class SlotSelectionOutcome:
    intervention: Intervention
    rescheduled: bool
    available_user_ids: List[str] = field(default_factory=list)
    conflicting_user_ids: List[str] = field(default_factory=list)


class SlotSelectionService:
    """
    Schedules an intervention on an explicitly chosen slot.

    Participants' declared availabilities on the chosen date are checked
    against the slot and reported (available vs conflicting users); the
    selection is not refused because of conflicts.
    """

    def __init__(self, db: Session):
        self.db = db
        self.interventions = InterventionRepository(db)
        self.availabilities = AvailabilityRepository(db)
        self.matches = MatchPersistenceGateway(db)

    def select_slot(
        self,
        user_id: str,
        intervention_id: str,
        slot_date: date,
        start_time: str,
        end_time: str,
        comment: Optional[str] = None,
    ) -> SlotSelectionOutcome:
        """
        Raises:
            InterventionNotFound, UserNotFound
            ParticipantAccessDenied: caller is not a participant
            InvalidInterventionStatus: status not planification/approuvee/planifiee
        """
        log = logger.bind(intervention_id=intervention_id, user_id=user_id)
        set_matching_context(intervention_id, user_id, "select_slot")

        try:
            intervention = self.interventions.lock(intervention_id)
            user = self.interventions.get_user(user_id)

            if not self.interventions.is_participant(intervention, user):
                raise ParticipantAccessDenied("User is not a participant of this intervention")
            if intervention.status not in SLOT_SELECTABLE_STATUSES:
                raise InvalidInterventionStatus(intervention.status, SLOT_SELECTABLE_STATUSES)

            rescheduled = intervention.status == STATUS_SCHEDULED
            if rescheduled:
                log.info("intervention_rescheduling", scheduled_date=str(intervention.scheduled_date))

            selected = TimeInterval.from_strings(start_time, end_time)
            available, conflicting = self._check_participants(intervention_id, slot_date, selected)
            log.info("slot_verified", available=len(available), conflicting=len(conflicting))

            note = None
            if comment:
                note = f"Planning: {comment} | Selected slot: {slot_date.isoformat()} {selected}"

            intervention = self.interventions.update_intervention_schedule(
                intervention_id,
                scheduled_date=slot_date,
                scheduled_time=minutes_to_time(selected.start),
                comment=note,
            )
            cleared = self.matches.clear_matches(intervention_id)
            log.info("slot_selected", slot=str(selected), date=slot_date.isoformat(), cleared_matches=cleared)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return SlotSelectionOutcome(
            intervention=intervention,
            rescheduled=rescheduled,
            available_user_ids=available,
            conflicting_user_ids=conflicting,
        )

    def _check_participants(self, intervention_id: str, slot_date: date, selected: TimeInterval):
        available, conflicting = [], []
        for row in self.availabilities.list_availabilities(intervention_id):
            if row.date != slot_date:
                continue
            interval = TimeInterval.from_strings(row.start_time, row.end_time)
            bucket = available if interval.overlaps(selected) else conflicting
            if row.user_id not in bucket:
                bucket.append(row.user_id)
        # A user with at least one overlapping window counts as available
        conflicting = [u for u in conflicting if u not in available]
        return available, conflicting
