"""
Candidate Match Scoring

Turns a tenant/provider overlap into a 0-100 confidence score built from
three additive, independently capped components:

- duration (0-60): longer windows are operationally safer
- date proximity (0-25): sooner slots are preferred
- time of day (0-15): unusual hours are softly penalized

Components are summed rather than multiplied so a weak dimension never
zeroes out an otherwise good slot.
"""

from datetime import date, datetime
from typing import Optional, Union

import structlog

from app.services.matching.intervals import days_between

logger = structlog.get_logger(__name__)

TIME_OF_DAY_FROM_OVERLAP = "overlap_start"
TIME_OF_DAY_FROM_DATE = "date"

MAX_SCORE = 100

# (minimum minutes, points), checked in order
DURATION_STEPS = ((240, 60), (180, 50), (120, 40), (60, 25))
DURATION_FLOOR = 10

# (maximum days away, points), checked in order
PROXIMITY_STEPS = ((7, 25), (14, 20), (30, 15))
PROXIMITY_FLOOR = 5

BUSINESS_HOURS = (9, 17)
EXTENDED_HOURS = (8, 18)
BUSINESS_HOURS_POINTS = 15
EXTENDED_HOURS_POINTS = 10
OFF_HOURS_POINTS = 5


def score_duration(duration_minutes: int) -> int:
    """Step function on the overlap length: 60/50/40/25, else 10."""
    for minimum, points in DURATION_STEPS:
        if duration_minutes >= minimum:
            return points
    return DURATION_FLOOR


def score_date_proximity(candidate_date: date, reference_date: date) -> int:
    """Points for how close the slot is to today, in either direction."""
    distance = days_between(candidate_date, reference_date)
    for max_days, points in PROXIMITY_STEPS:
        if distance <= max_days:
            return points
    return PROXIMITY_FLOOR


def score_time_of_day(hour: int) -> int:
    """15 inside 9-17, 10 inside 8-18, 5 otherwise (bounds inclusive)."""
    if BUSINESS_HOURS[0] <= hour <= BUSINESS_HOURS[1]:
        return BUSINESS_HOURS_POINTS
    if EXTENDED_HOURS[0] <= hour <= EXTENDED_HOURS[1]:
        return EXTENDED_HOURS_POINTS
    return OFF_HOURS_POINTS


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def score_candidate(
    duration_minutes: int,
    candidate_date: date,
    reference_now: Union[date, datetime],
    overlap_start: Optional[int] = None,
    time_of_day_source: str = TIME_OF_DAY_FROM_OVERLAP,
) -> tuple[int, dict]:
    """
    Score one candidate overlap.

    Args:
        duration_minutes: Overlap length in minutes
        candidate_date: Calendar date of the overlap
        reference_now: "Today" used for proximity
        overlap_start: Overlap start in minutes since midnight
        time_of_day_source: "overlap_start" uses the real start hour;
            "date" reads the hour of the bare date, which is always midnight

    Returns:
        Tuple of (score 0-100, component breakdown dict)

    Example:
        >>> score, details = score_candidate(150, date(2025, 6, 10), date(2025, 6, 8), overlap_start=600)
        >>> score
        80
    """
    if time_of_day_source == TIME_OF_DAY_FROM_DATE or overlap_start is None:
        hour = 0
        hour_source = TIME_OF_DAY_FROM_DATE
    else:
        hour = overlap_start // 60
        hour_source = TIME_OF_DAY_FROM_OVERLAP

    components = {
        "duration": score_duration(duration_minutes),
        "date_proximity": score_date_proximity(candidate_date, _as_date(reference_now)),
        "time_of_day": score_time_of_day(hour),
    }
    total = min(MAX_SCORE, sum(components.values()))

    logger.debug("candidate_scored",
                 date=candidate_date.isoformat(),
                 duration_minutes=duration_minutes,
                 hour=hour,
                 hour_source=hour_source,
                 score=total,
                 components=components)

    return total, {
        "components": components,
        "hour": hour,
        "hour_source": hour_source,
    }
