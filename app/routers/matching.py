"""
Matching API Router
On-demand matching, stored matches and manual slot selection
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import structlog

from app.models.availability_schemas import SlotSelectionRequest
from app.routers.dependencies import get_caller_id, require_db, to_http_error
from app.services.errors import AvailabilityServiceError
from app.services.match_review import MatchReviewService
from app.services.matching import MatchTier
from app.services.slot_selection import SlotSelectionService

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/interventions", tags=["matching"])


@router.post("/{intervention_id}/match-availabilities")
def match_availabilities(
    intervention_id: str,
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """
    Run the matcher on the current availabilities and refresh stored matches.

    Returns the engine result: perfect_match, partial_matches, suggestions,
    message, conflicts and statistics. Does not change the intervention status.
    """
    try:
        result = MatchReviewService(db).compute_matches(user_id, intervention_id)
    except AvailabilityServiceError as e:
        raise to_http_error(e)

    return result.to_dict()


@router.get("/{intervention_id}/matches")
def list_matches(
    intervention_id: str,
    tier: Optional[MatchTier] = Query(None, description="Filter by tier: perfect, partial, suggestion"),
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """Matches stored by the latest run, best first."""
    try:
        rows = MatchReviewService(db).stored_matches(
            user_id, intervention_id, tier=tier.value if tier else None
        )
    except AvailabilityServiceError as e:
        raise to_http_error(e)

    matches = []
    for row in rows:
        matches.append({
            "id": row.id,
            "rank": row.rank,
            "tier": row.tier,
            "date": row.matched_date.isoformat(),
            "start_time": row.matched_start_time.strftime("%H:%M"),
            "end_time": row.matched_end_time.strftime("%H:%M"),
            "participants": row.participant_user_ids,
            "overlap_duration": row.overlap_duration,
            "score": row.match_score,
            "is_perfect": row.is_perfect,
            "calculated_at": row.calculated_at.isoformat() if row.calculated_at else None,
        })

    return {"total": len(matches), "matches": matches}


@router.put("/{intervention_id}/select-slot")
def select_slot(
    intervention_id: str,
    body: SlotSelectionRequest,
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """
    Schedule the intervention on a chosen slot.

    Allowed while the intervention is planification, approuvee or planifiee
    (re-scheduling). Stored matches are cleared afterwards.
    """
    slot = body.selected_slot
    try:
        outcome = SlotSelectionService(db).select_slot(
            user_id,
            intervention_id,
            slot_date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            comment=body.comment,
        )
    except AvailabilityServiceError as e:
        logger.info("slot_selection_rejected", intervention_id=intervention_id,
                    user_id=user_id, reason=str(e))
        raise to_http_error(e)

    intervention = outcome.intervention
    return {
        "success": True,
        "message": f"Intervention scheduled on {slot.date.isoformat()} from {slot.start_time} to {slot.end_time}",
        "intervention": {
            "id": intervention.id,
            "status": intervention.status,
            "scheduled_date": intervention.scheduled_date.isoformat(),
            "scheduled_time": intervention.scheduled_time.strftime("%H:%M"),
        },
        "rescheduled": outcome.rescheduled,
        "available_users": outcome.available_user_ids,
        "conflicting_users": outcome.conflicting_user_ids,
    }
