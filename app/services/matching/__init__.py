"""
Matching Engine Service Package

Provides interval overlap, candidate scoring, tier classification and
conflict detection used by the availability matching engine.
"""

from app.services.matching.intervals import (
    TimeInterval,
    Overlap,
    overlap,
    parse_hhmm,
    format_minutes,
    minutes_to_time,
    days_between,
)
from app.services.matching.scoring import (
    score_candidate,
    score_duration,
    score_date_proximity,
    score_time_of_day,
    TIME_OF_DAY_FROM_DATE,
    TIME_OF_DAY_FROM_OVERLAP,
)
from app.services.matching.candidate import CandidateMatch, sort_candidates
from app.services.matching.classifier import MatchClassifier, MatchTier, ClassifiedMatches
from app.services.matching.conflicts import detect_conflicts

__all__ = [
    # Intervals
    "TimeInterval",
    "Overlap",
    "overlap",
    "parse_hhmm",
    "format_minutes",
    "minutes_to_time",
    "days_between",
    # Scoring
    "score_candidate",
    "score_duration",
    "score_date_proximity",
    "score_time_of_day",
    "TIME_OF_DAY_FROM_DATE",
    "TIME_OF_DAY_FROM_OVERLAP",
    # Classification
    "CandidateMatch",
    "sort_candidates",
    "MatchClassifier",
    "MatchTier",
    "ClassifiedMatches",
    # Conflicts
    "detect_conflicts",
]
