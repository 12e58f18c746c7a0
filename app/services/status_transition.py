"""
Status Transition Trigger

Runs the matching engine in-process after availabilities change, stores the
top results and schedules the intervention when a perfect match exists.

Storing matches and updating the status are best-effort side effects: each
runs in its own savepoint, failures are logged and reported, and the
surrounding availability submission is never rolled back because of them.
"""

from datetime import date, datetime
from typing import Optional, Union

import structlog
from sqlalchemy.orm import Session

from app.models.intervention import Intervention, STATUS_PLANNING
from app.services.availability_matching_engine import AvailabilityMatchingEngine, MatchingResult
from app.services.availability_repository import AvailabilityRepository
from app.services.intervention_repository import InterventionRepository
from app.services.match_persistence import MatchPersistenceGateway
from app.services.matching import minutes_to_time
from app.services.monitoring.error_tracking import add_breadcrumb, capture_exception

logger = structlog.get_logger(__name__)

# Only interventions still being planned are scheduled automatically
AUTO_SCHEDULE_STATUSES = (STATUS_PLANNING,)


class StatusTransitionTrigger:
    """
    Orchestrates rematch -> persist -> schedule for one intervention.

    Usage:
        trigger = StatusTransitionTrigger(db)
        result = trigger.after_submit(intervention_id)
        db.commit()

    The caller holds the intervention lock and owns the commit.
    """

    def __init__(
        self,
        db: Session,
        engine: Optional[AvailabilityMatchingEngine] = None,
        availability_repository: Optional[AvailabilityRepository] = None,
        intervention_repository: Optional[InterventionRepository] = None,
        match_gateway: Optional[MatchPersistenceGateway] = None,
    ):
        self.db = db
        self.engine = engine or AvailabilityMatchingEngine()
        self.availabilities = availability_repository or AvailabilityRepository(db)
        self.interventions = intervention_repository or InterventionRepository(db)
        self.matches = match_gateway or MatchPersistenceGateway(db)

    def run_matching(
        self,
        intervention_id: str,
        reference_now: Optional[Union[date, datetime]] = None,
    ) -> MatchingResult:
        """Fetch both sides of the intervention and run the engine."""
        tenant_slots = self.availabilities.list_slots(intervention_id, "tenant")
        provider_slots = self.availabilities.list_slots(intervention_id, "provider")

        logger.info("matching_started",
                    intervention_id=intervention_id,
                    tenant_slots=len(tenant_slots),
                    provider_slots=len(provider_slots))

        return self.engine.match(tenant_slots, provider_slots, reference_now=reference_now)

    def after_submit(
        self,
        intervention_id: str,
        reference_now: Optional[Union[date, datetime]] = None,
    ) -> Optional[MatchingResult]:
        """
        Rematch after a submission and apply the side effects.

        Returns:
            The MatchingResult, or None when matching itself could not run
        """
        log = logger.bind(intervention_id=intervention_id)
        add_breadcrumb("matching", "rematch after availability submission",
                       data={"intervention_id": intervention_id})

        try:
            with self.db.begin_nested():
                result = self.run_matching(intervention_id, reference_now=reference_now)
        except Exception as e:
            log.warning("automatic_matching_failed", error=str(e), exc_info=True)
            capture_exception(e)
            return None

        if not result.success:
            log.info("automatic_matching_no_match", message=result.message)

        self.store_matches(intervention_id, result)

        if result.perfect_match is not None:
            intervention = self.db.get(Intervention, intervention_id)
            if intervention is not None and intervention.status in AUTO_SCHEDULE_STATUSES:
                self._schedule(intervention_id, result, log)
            else:
                log.info("auto_schedule_skipped",
                         status=intervention.status if intervention is not None else None)

        return result

    def store_matches(self, intervention_id: str, result: MatchingResult) -> bool:
        """Replace stored matches; False when the write failed and was rolled back."""
        try:
            with self.db.begin_nested():
                self.matches.replace_matches(intervention_id, result.matches_to_store())
            return True
        except Exception as e:
            logger.warning("match_persistence_failed", intervention_id=intervention_id, error=str(e), exc_info=True)
            capture_exception(e)
            return False

    def _schedule(self, intervention_id: str, result: MatchingResult, log) -> bool:
        best = result.perfect_match
        try:
            with self.db.begin_nested():
                self.interventions.update_intervention_schedule(
                    intervention_id,
                    scheduled_date=best.date,
                    scheduled_time=minutes_to_time(best.overlap_start),
                )
            log.info("intervention_auto_scheduled",
                     date=best.date.isoformat(),
                     start_time=best.start_time,
                     score=best.score)
            return True
        except Exception as e:
            log.warning("status_update_failed", error=str(e), exc_info=True)
            capture_exception(e)
            return False
