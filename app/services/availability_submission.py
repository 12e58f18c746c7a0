"""
Availability Submission Service

Replace-and-rematch for one participant on one intervention, executed as a
single transaction behind a row lock on the intervention:

1. lock intervention (SELECT ... FOR UPDATE)
2. check the caller may submit
3. replace the caller's availabilities
4. rematch, store matches, schedule on perfect match (best-effort)
5. commit

Two participants submitting at the same time are serialized by step 1, so
every rematch sees a complete provider/tenant set and the status transition
fires at most once per consistent state.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence, Union

import structlog
from sqlalchemy.orm import Session

from app.models.intervention import STATUS_PLANNING, STATUS_SCHEDULED
from app.models.user import ROLE_TENANT
from app.models.user_availability import UserAvailability
from app.services.availability_matching_engine import MatchingResult
from app.services.availability_repository import AvailabilityRepository
from app.services.errors import InvalidInterventionStatus, ParticipantAccessDenied
from app.services.intervention_repository import InterventionRepository
from app.services.monitoring.error_tracking import set_matching_context
from app.services.status_transition import StatusTransitionTrigger

logger = structlog.get_logger(__name__)

# Tenants may only declare availabilities while the intervention is being planned
TENANT_SUBMISSION_STATUSES = (STATUS_PLANNING,)


@dataclass
class SubmissionOutcome:
    """What a submission stored and what the rematch produced."""
    availabilities: List[UserAvailability] = field(default_factory=list)
    matching: Optional[MatchingResult] = None
    scheduled: bool = False  # intervention moved to planifiee by this submission


class AvailabilitySubmissionService:
    """
    Entry point for availability submissions.

    Usage:
        service = AvailabilitySubmissionService(db)
        outcome = service.submit_tenant_availability(user_id, intervention_id, slots)
    """

    def __init__(
        self,
        db: Session,
        trigger: Optional[StatusTransitionTrigger] = None,
    ):
        self.db = db
        self.interventions = InterventionRepository(db)
        self.availabilities = AvailabilityRepository(db)
        self.trigger = trigger or StatusTransitionTrigger(
            db,
            availability_repository=self.availabilities,
            intervention_repository=self.interventions,
        )

    def submit_tenant_availability(
        self,
        user_id: str,
        intervention_id: str,
        slots: Sequence,
        reference_now: Optional[Union[date, datetime]] = None,
    ) -> SubmissionOutcome:
        """
        Tenant declares availabilities; always followed by a rematch.

        Raises:
            InterventionNotFound, UserNotFound
            ParticipantAccessDenied: caller is not the intervention's tenant
            InvalidInterventionStatus: intervention is not in planning
        """
        return self._submit(user_id, intervention_id, slots, tenant_only=True, reference_now=reference_now)

    def submit_user_availability(
        self,
        user_id: str,
        intervention_id: str,
        slots: Sequence,
        reference_now: Optional[Union[date, datetime]] = None,
    ) -> SubmissionOutcome:
        """
        Any participant replaces their availabilities. Tenant and provider
        submissions trigger a rematch; manager rows are stored only.
        An empty list clears the caller's availabilities.
        """
        return self._submit(user_id, intervention_id, slots, tenant_only=False, reference_now=reference_now)

    def _submit(
        self,
        user_id: str,
        intervention_id: str,
        slots: Sequence,
        tenant_only: bool,
        reference_now: Optional[Union[date, datetime]],
    ) -> SubmissionOutcome:
        log = logger.bind(intervention_id=intervention_id, user_id=user_id)
        set_matching_context(intervention_id, user_id,
                             "tenant_availability" if tenant_only else "user_availability")

        try:
            intervention = self.interventions.lock(intervention_id)
            user = self.interventions.get_user(user_id)

            if tenant_only:
                if user.role != ROLE_TENANT or intervention.tenant_id != user.id:
                    raise ParticipantAccessDenied(
                        "Only the intervention's tenant can declare tenant availabilities"
                    )
                if intervention.status not in TENANT_SUBMISSION_STATUSES:
                    raise InvalidInterventionStatus(intervention.status, TENANT_SUBMISSION_STATUSES)
            elif not self.interventions.is_participant(intervention, user):
                raise ParticipantAccessDenied("User is not a participant of this intervention")

            rows = self.availabilities.replace_availabilities(user.id, intervention_id, slots)
            log.info("availabilities_saved", count=len(rows), role=user.role)

            matching = None
            scheduled = False
            if user.matching_role is not None:
                previous_status = intervention.status
                matching = self.trigger.after_submit(intervention_id, reference_now=reference_now)
                # Only a transition made by this rematch counts
                scheduled = (
                    previous_status != STATUS_SCHEDULED
                    and intervention.status == STATUS_SCHEDULED
                )
            else:
                log.info("rematch_skipped", reason="non_matching_role", role=user.role)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return SubmissionOutcome(availabilities=rows, matching=matching, scheduled=scheduled)
