"""
Availability Matching Engine

Pairs every tenant availability with every provider availability declared on
the same date, scores the overlaps and classifies them into perfect / partial
/ suggestion tiers.

The engine is a pure, synchronous computation: no I/O, no shared mutable
state. Degenerate inputs (no tenant data, no provider data, no overlap) are
reported through success=False and a message, never through exceptions.
Persistence and the status transition are handled by the callers in
app.services.status_transition.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from app.config import settings
from app.services.matching import (
    CandidateMatch,
    ClassifiedMatches,
    MatchClassifier,
    MatchTier,
    TimeInterval,
    detect_conflicts,
    overlap,
    score_candidate,
    sort_candidates,
)

logger = structlog.get_logger(__name__)

MESSAGE_NO_TENANT = "No tenant availability declared for this intervention"
MESSAGE_NO_PROVIDER = "No provider availability declared for this intervention"
MESSAGE_NO_COMPATIBLE_SLOT = (
    "No compatible slot found, tenant and provider should adjust their availabilities"
)


@dataclass(frozen=True)
class AvailabilitySlot:
    """
    Engine input: one declared window, {user_id, date, start_time, end_time}.
    """
    user_id: str
    date: date
    interval: TimeInterval
    role: Optional[str] = None  # tenant, provider

    @classmethod
    def from_dict(cls, data: Dict[str, Any], role: Optional[str] = None) -> "AvailabilitySlot":
        """Build from the boundary shape (date "YYYY-MM-DD", times "HH:MM")."""
        day = data["date"]
        if isinstance(day, str):
            day = date.fromisoformat(day)
        return cls(
            user_id=str(data["user_id"]),
            date=day,
            interval=TimeInterval.from_strings(data["start_time"], data["end_time"]),
            role=role,
        )

    @classmethod
    def from_model(cls, row: Any, role: Optional[str] = None) -> "AvailabilitySlot":
        """Build from a UserAvailability row."""
        return cls(
            user_id=str(row.user_id),
            date=row.date,
            interval=TimeInterval.from_strings(row.start_time, row.end_time),
            role=role,
        )


@dataclass
class MatchingResult:
    """
    Result of one matching run.
    """
    success: bool
    message: str
    perfect_match: Optional[CandidateMatch] = None
    partial_matches: List[CandidateMatch] = field(default_factory=list)
    suggestions: List[CandidateMatch] = field(default_factory=list)
    candidates: List[CandidateMatch] = field(default_factory=list)  # All, ranked
    conflicts: List[dict] = field(default_factory=list)
    statistics: Dict[str, int] = field(default_factory=dict)

    def matches_to_store(self) -> List[Tuple[CandidateMatch, MatchTier]]:
        """
        Top results worth keeping: perfect, then partial, then suggestions,
        each candidate once, tagged with its highest tier.
        """
        stored: List[Tuple[CandidateMatch, MatchTier]] = []
        seen = set()
        pools = (
            ([self.perfect_match] if self.perfect_match else [], MatchTier.PERFECT),
            (self.partial_matches, MatchTier.PARTIAL),
            (self.suggestions, MatchTier.SUGGESTION),
        )
        for pool, tier in pools:
            for candidate in pool:
                key = candidate.identity()
                if key in seen:
                    continue
                seen.add(key)
                stored.append((candidate, tier))
        return stored

    def to_dict(self) -> dict:
        """Boundary shape returned to API callers."""
        return {
            "success": self.success,
            "perfect_match": self.perfect_match.to_dict() if self.perfect_match else None,
            "partial_matches": [c.to_dict() for c in self.partial_matches],
            "suggestions": [c.to_dict() for c in self.suggestions],
            "message": self.message,
            "conflicts": self.conflicts,
            "statistics": self.statistics,
        }


def build_message(classified: ClassifiedMatches) -> str:
    """Human-readable summary chosen by tier precedence."""
    if classified.perfect_match is not None:
        best = classified.perfect_match
        return (
            f"Perfect match found on {best.date.isoformat()} from {best.start_time} "
            f"to {best.end_time} ({best.duration_minutes} minutes)"
        )
    if classified.partial_matches:
        count = len(classified.partial_matches)
        return f"{count} partial match{'es' if count > 1 else ''} found, manual validation recommended"
    if classified.suggestions:
        count = len(classified.suggestions)
        return f"{count} possible slot{'s' if count > 1 else ''} found, negotiation required"
    return MESSAGE_NO_COMPATIBLE_SLOT


class AvailabilityMatchingEngine:
    """
    Tenant/provider availability matcher.

    Usage:
        engine = AvailabilityMatchingEngine()
        result = engine.match(tenant_slots, provider_slots)

        if result.perfect_match:
            schedule(result.perfect_match.date, result.perfect_match.start_time)
    """

    def __init__(
        self,
        classifier: Optional[MatchClassifier] = None,
        time_of_day_source: Optional[str] = None,
    ):
        self.classifier = classifier or MatchClassifier()
        self.time_of_day_source = time_of_day_source or settings.time_of_day_source

    def match(
        self,
        tenant_availabilities: Sequence[Union[AvailabilitySlot, Dict[str, Any]]],
        provider_availabilities: Sequence[Union[AvailabilitySlot, Dict[str, Any]]],
        reference_now: Optional[Union[date, datetime]] = None,
    ) -> MatchingResult:
        """
        Compute, score and classify every tenant/provider overlap.

        Args:
            tenant_availabilities: Tenant slots (AvailabilitySlot or boundary dicts)
            provider_availabilities: Provider slots (AvailabilitySlot or boundary dicts)
            reference_now: "Today" for proximity scoring (default: date.today())

        Returns:
            MatchingResult; success is True iff at least one overlap was found
        """
        tenants = self._normalize(tenant_availabilities, "tenant")
        providers = self._normalize(provider_availabilities, "provider")
        today = reference_now or date.today()

        statistics = self._statistics(tenants, providers)
        conflicts = detect_conflicts(tenants + providers)

        if not tenants:
            logger.info("matching_skipped", reason="no_tenant_availability")
            return MatchingResult(success=False, message=MESSAGE_NO_TENANT,
                                  conflicts=conflicts, statistics=statistics)
        if not providers:
            logger.info("matching_skipped", reason="no_provider_availability")
            return MatchingResult(success=False, message=MESSAGE_NO_PROVIDER,
                                  conflicts=conflicts, statistics=statistics)

        candidates = sort_candidates(list(self._candidates(tenants, providers, today)))
        classified = self.classifier.classify(candidates)

        statistics["candidate_count"] = len(candidates)
        statistics["best_match_score"] = candidates[0].score if candidates else 0

        result = MatchingResult(
            success=bool(candidates),
            message=build_message(classified),
            perfect_match=classified.perfect_match,
            partial_matches=classified.partial_matches,
            suggestions=classified.suggestions,
            candidates=candidates,
            conflicts=conflicts,
            statistics=statistics,
        )

        logger.info("matching_completed",
                    candidates=len(candidates),
                    perfect=result.perfect_match is not None,
                    partial=len(result.partial_matches),
                    suggestions=len(result.suggestions),
                    best_score=statistics["best_match_score"])

        return result

    def _candidates(
        self,
        tenants: List[AvailabilitySlot],
        providers: List[AvailabilitySlot],
        today: Union[date, datetime],
    ) -> Iterable[CandidateMatch]:
        # O(T x P); both sides are a handful of human-entered windows
        for tenant_slot in tenants:
            for provider_slot in providers:
                if tenant_slot.date != provider_slot.date:
                    continue

                common = overlap(tenant_slot.interval, provider_slot.interval)
                if common.is_empty:
                    continue

                score, details = score_candidate(
                    duration_minutes=common.duration_minutes,
                    candidate_date=tenant_slot.date,
                    reference_now=today,
                    overlap_start=common.start,
                    time_of_day_source=self.time_of_day_source,
                )

                yield CandidateMatch(
                    date=tenant_slot.date,
                    overlap_start=common.start,
                    overlap_end=common.end,
                    duration_minutes=common.duration_minutes,
                    participants=[tenant_slot.user_id, provider_slot.user_id],
                    score=score,
                    scoring_details=details,
                )

    @staticmethod
    def _normalize(slots, role: str) -> List[AvailabilitySlot]:
        return [
            slot if isinstance(slot, AvailabilitySlot) else AvailabilitySlot.from_dict(slot, role=role)
            for slot in (slots or [])
        ]

    @staticmethod
    def _statistics(tenants: List[AvailabilitySlot], providers: List[AvailabilitySlot]) -> Dict[str, int]:
        return {
            "total_users": len({s.user_id for s in tenants} | {s.user_id for s in providers}),
            "tenant_slots": len(tenants),
            "provider_slots": len(providers),
            "total_availability_slots": len(tenants) + len(providers),
            "candidate_count": 0,
            "best_match_score": 0,
        }


def match_availabilities(
    tenant_availabilities: Sequence[Dict[str, Any]],
    provider_availabilities: Sequence[Dict[str, Any]],
    reference_now: Optional[Union[date, datetime]] = None,
) -> dict:
    """Plain-data entry point: boundary dicts in, boundary dict out."""
    engine = AvailabilityMatchingEngine()
    return engine.match(tenant_availabilities, provider_availabilities, reference_now=reference_now).to_dict()


__all__ = [
    "AvailabilityMatchingEngine",
    "AvailabilitySlot",
    "MatchingResult",
    "build_message",
    "match_availabilities",
]
