"""
Candidate match value object shared by the scorer, classifier and engine.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List

from app.services.matching.intervals import format_minutes


@dataclass
class CandidateMatch:
    """
    One overlap between exactly one tenant interval and one provider interval
    on the same date.
    """
    date: date
    overlap_start: int  # minutes since midnight
    overlap_end: int
    duration_minutes: int
    participants: List[str]  # [tenant_id, provider_id]
    score: int  # 0-100, derived by the scorer
    scoring_details: Dict[str, Any] = field(default_factory=dict)

    @property
    def tenant_id(self) -> str:
        return self.participants[0]

    @property
    def provider_id(self) -> str:
        return self.participants[1]

    @property
    def start_time(self) -> str:
        return format_minutes(self.overlap_start)

    @property
    def end_time(self) -> str:
        return format_minutes(self.overlap_end)

    def sort_key(self) -> tuple:
        """Score descending, then earliest date, earliest start, participant ids."""
        return (-self.score, self.date, self.overlap_start, self.tenant_id, self.provider_id)

    def identity(self) -> tuple:
        return (self.date, self.overlap_start, self.overlap_end, tuple(self.participants))

    def to_dict(self) -> dict:
        """Boundary serialization: {date, start_time, end_time, participants, overlap_duration, score}."""
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "participants": list(self.participants),
            "overlap_duration": self.duration_minutes,
            "score": self.score,
        }


def sort_candidates(candidates: List[CandidateMatch]) -> List[CandidateMatch]:
    """Deterministic ordering used everywhere candidates are ranked."""
    return sorted(candidates, key=CandidateMatch.sort_key)
