"""
Availability API Router
Participants declare and read their availabilities for an intervention
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import structlog

from app.models.availability_schemas import AvailabilityOut, AvailabilitySubmission, SubmissionResponse
from app.routers.dependencies import get_caller_id, require_db, to_http_error
from app.services.availability_submission import AvailabilitySubmissionService, SubmissionOutcome
from app.services.errors import AvailabilityServiceError
from app.services.match_review import MatchReviewService

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/interventions", tags=["availabilities"])


def _submission_response(outcome: SubmissionOutcome) -> SubmissionResponse:
    count = len(outcome.availabilities)
    if outcome.scheduled:
        message = f"{count} availabilities saved, intervention scheduled automatically"
    elif outcome.matching is not None:
        message = f"{count} availabilities saved, {outcome.matching.message}"
    else:
        message = f"{count} availabilities saved"

    return SubmissionResponse(
        success=True,
        message=message,
        availabilities_count=count,
        matching=outcome.matching.to_dict() if outcome.matching is not None else None,
    )


# Sync handlers: the session blocks while waiting on the intervention row lock
@router.post("/{intervention_id}/tenant-availability", response_model=SubmissionResponse)
def submit_tenant_availability(
    intervention_id: str,
    body: AvailabilitySubmission,
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """
    Tenant declares availabilities (full replacement).

    Every accepted submission is followed by a rematch; a perfect match
    schedules the intervention. Matching problems never fail the request.
    """
    try:
        outcome = AvailabilitySubmissionService(db).submit_tenant_availability(
            user_id, intervention_id, body.availabilities
        )
    except AvailabilityServiceError as e:
        logger.info("tenant_availability_rejected", intervention_id=intervention_id,
                    user_id=user_id, reason=str(e))
        raise to_http_error(e)

    logger.info("tenant_availability_submitted", intervention_id=intervention_id,
                user_id=user_id, count=len(outcome.availabilities), scheduled=outcome.scheduled)
    return _submission_response(outcome)


@router.get("/{intervention_id}/tenant-availability")
def get_tenant_availability(
    intervention_id: str,
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """Caller's own declared availabilities."""
    try:
        rows = MatchReviewService(db).own_availabilities(user_id, intervention_id)
    except AvailabilityServiceError as e:
        raise to_http_error(e)

    return {
        "success": True,
        "availabilities": [AvailabilityOut.model_validate(r).model_dump(mode="json") for r in rows],
    }


@router.post("/{intervention_id}/user-availability", response_model=SubmissionResponse)
def submit_user_availability(
    intervention_id: str,
    body: AvailabilitySubmission,
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """
    Any participant replaces their availabilities. An empty list clears them.
    """
    try:
        outcome = AvailabilitySubmissionService(db).submit_user_availability(
            user_id, intervention_id, body.availabilities
        )
    except AvailabilityServiceError as e:
        logger.info("user_availability_rejected", intervention_id=intervention_id,
                    user_id=user_id, reason=str(e))
        raise to_http_error(e)

    logger.info("user_availability_submitted", intervention_id=intervention_id,
                user_id=user_id, count=len(outcome.availabilities))
    return _submission_response(outcome)


@router.get("/{intervention_id}/user-availability")
def get_user_availability(
    intervention_id: str,
    user_id: str = Depends(get_caller_id),
    db: Session = Depends(require_db),
):
    """Caller's own availabilities plus every participant's, with roles."""
    service = MatchReviewService(db)
    try:
        own = service.own_availabilities(user_id, intervention_id)
        everyone = service.all_availabilities(user_id, intervention_id)
    except AvailabilityServiceError as e:
        raise to_http_error(e)

    all_rows = []
    for row in everyone:
        item = AvailabilityOut.model_validate(row).model_dump(mode="json")
        item["user_name"] = row.user.name if row.user else None
        item["user_role"] = row.user.role if row.user else None
        all_rows.append(item)

    return {
        "success": True,
        "user_availabilities": [AvailabilityOut.model_validate(r).model_dump(mode="json") for r in own],
        "all_availabilities": all_rows,
    }
