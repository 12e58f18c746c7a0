"""
Database Models
"""

from app.models.user import User
from app.models.intervention import Intervention, InterventionAssignment
from app.models.user_availability import UserAvailability
from app.models.availability_match import AvailabilityMatch

__all__ = [
    "User",
    "Intervention",
    "InterventionAssignment",
    "UserAvailability",
    "AvailabilityMatch",
]
