"""
Sentry Error Tracking
Reports swallowed side-effect failures and unhandled request errors
"""

import logging
from typing import Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

logger = logging.getLogger(__name__)


def init_sentry() -> None:
    """
    Initialize Sentry SDK with FastAPI integration.

    If SENTRY_DSN is not configured, logs warning and returns (disabled).
    All other helpers are no-ops until Sentry is initialized.
    """
    from app.config import settings

    if settings.sentry_dsn is None:
        logger.warning("Sentry DSN not configured - error tracking disabled")
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment or settings.environment,
        traces_sample_rate=0.1,
        integrations=[
            FastApiIntegration(),
        ],
    )

    logger.info(
        "Sentry initialized",
        extra={"environment": settings.sentry_environment or settings.environment}
    )


def set_matching_context(
    intervention_id: str,
    user_id: Optional[str] = None,
    operation: Optional[str] = None,
) -> None:
    """
    Tag error reports with the intervention being processed.

    Args:
        intervention_id: Intervention whose availabilities are handled
        user_id: Caller, when known
        operation: e.g. "tenant_availability", "match", "select_slot"
    """
    sentry_sdk.set_context("matching", {
        "intervention_id": intervention_id,
        "user_id": user_id or "none",
        "operation": operation or "none",
    })
    sentry_sdk.set_tag("intervention_id", intervention_id)
    if operation:
        sentry_sdk.set_tag("operation", operation)


def add_breadcrumb(
    category: str,
    message: str,
    level: str = "info",
    data: Optional[dict] = None
) -> None:
    """Add a breadcrumb to the trail attached to the next error report."""
    sentry_sdk.add_breadcrumb(
        category=category,
        message=message,
        level=level,
        data=data or {}
    )


def capture_exception(error: BaseException) -> None:
    """Report an exception that was handled and not re-raised."""
    sentry_sdk.capture_exception(error)
