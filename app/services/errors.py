"""
Domain errors raised by the availability services and translated to HTTP
status codes by the routers.
"""


class AvailabilityServiceError(Exception):
    """Base class for availability service errors."""
    status_code = 400


class InterventionNotFound(AvailabilityServiceError):
    status_code = 404

    def __init__(self, intervention_id: str):
        self.intervention_id = intervention_id
        super().__init__(f"Intervention {intervention_id} not found")


class UserNotFound(AvailabilityServiceError):
    status_code = 404

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class ParticipantAccessDenied(AvailabilityServiceError):
    """Caller is not a participant of the intervention or has the wrong role."""
    status_code = 403


class InvalidInterventionStatus(AvailabilityServiceError):
    status_code = 400

    def __init__(self, status: str, allowed: tuple):
        self.status = status
        self.allowed = allowed
        super().__init__(
            f"Operation not allowed for intervention status '{status}' "
            f"(allowed: {', '.join(allowed)})"
        )
