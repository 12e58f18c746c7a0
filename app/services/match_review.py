"""
Match Review Service
On-demand matching and read access for intervention participants
"""

from datetime import date, datetime
from typing import List, Optional, Union

import structlog
from sqlalchemy.orm import Session

from app.models.availability_match import AvailabilityMatch
from app.models.user_availability import UserAvailability
from app.services.availability_matching_engine import MatchingResult
from app.services.availability_repository import AvailabilityRepository
from app.services.errors import ParticipantAccessDenied
from app.services.intervention_repository import InterventionRepository
from app.services.match_persistence import MatchPersistenceGateway
from app.services.monitoring.error_tracking import set_matching_context
from app.services.status_transition import StatusTransitionTrigger

logger = structlog.get_logger(__name__)


class MatchReviewService:
    """
    Lets participants run the matcher explicitly and inspect its inputs and
    stored outputs. Running the matcher here refreshes the stored matches but
    never changes the intervention status.
    """

    def __init__(self, db: Session, trigger: Optional[StatusTransitionTrigger] = None):
        self.db = db
        self.interventions = InterventionRepository(db)
        self.availabilities = AvailabilityRepository(db)
        self.matches = MatchPersistenceGateway(db)
        self.trigger = trigger or StatusTransitionTrigger(
            db,
            availability_repository=self.availabilities,
            intervention_repository=self.interventions,
            match_gateway=self.matches,
        )

    def compute_matches(
        self,
        user_id: str,
        intervention_id: str,
        reference_now: Optional[Union[date, datetime]] = None,
    ) -> MatchingResult:
        set_matching_context(intervention_id, user_id, "match")

        try:
            intervention = self.interventions.lock(intervention_id)
            self._require_participant(intervention, user_id)

            result = self.trigger.run_matching(intervention_id, reference_now=reference_now)
            stored = self.trigger.store_matches(intervention_id, result)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("matches_computed",
                    intervention_id=intervention_id,
                    user_id=user_id,
                    success=result.success,
                    stored=stored)
        return result

    def stored_matches(
        self,
        user_id: str,
        intervention_id: str,
        tier: Optional[str] = None,
    ) -> List[AvailabilityMatch]:
        intervention = self.interventions.get(intervention_id)
        self._require_participant(intervention, user_id)
        return self.matches.list_matches(intervention_id, tier=tier)

    def own_availabilities(self, user_id: str, intervention_id: str) -> List[UserAvailability]:
        intervention = self.interventions.get(intervention_id)
        self._require_participant(intervention, user_id)
        return self.availabilities.list_availabilities(intervention_id, user_id=user_id)

    def all_availabilities(self, user_id: str, intervention_id: str) -> List[UserAvailability]:
        intervention = self.interventions.get(intervention_id)
        self._require_participant(intervention, user_id)
        return self.availabilities.list_availabilities(intervention_id)

    def _require_participant(self, intervention, user_id: str):
        user = self.interventions.get_user(user_id)
        if not self.interventions.is_participant(intervention, user):
            raise ParticipantAccessDenied("User is not a participant of this intervention")
        return user
