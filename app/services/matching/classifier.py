"""
Match Classification

Partitions ranked candidate matches into three confidence tiers with fixed
thresholds. Tiers are not mutually exclusive: a perfect match also appears in
the partial and suggestion pools, callers pick by tier.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import structlog

from app.services.matching.candidate import CandidateMatch, sort_candidates

logger = structlog.get_logger(__name__)


class MatchTier(str, Enum):
    """Confidence tier of a candidate match"""
    PERFECT = "perfect"
    PARTIAL = "partial"
    SUGGESTION = "suggestion"


@dataclass
class ClassifiedMatches:
    """Output of the classifier."""
    perfect_match: Optional[CandidateMatch] = None
    partial_matches: List[CandidateMatch] = field(default_factory=list)
    suggestions: List[CandidateMatch] = field(default_factory=list)

    def tier_of(self, candidate: CandidateMatch) -> Optional[MatchTier]:
        """Highest tier a candidate was placed in, or None."""
        if candidate is self.perfect_match:
            return MatchTier.PERFECT
        if any(c is candidate for c in self.partial_matches):
            return MatchTier.PARTIAL
        if any(c is candidate for c in self.suggestions):
            return MatchTier.SUGGESTION
        return None


class MatchClassifier:
    """
    Threshold-based tiering of scored candidates.

    Perfect:    score >= 85 and duration >= 120 (first qualifying, at most one)
    Partial:    score >= 60 and duration >= 60 (top 5)
    Suggestion: duration >= 30 (top 10)
    """

    PERFECT_MIN_SCORE = 85
    PERFECT_MIN_DURATION = 120
    PARTIAL_MIN_SCORE = 60
    PARTIAL_MIN_DURATION = 60
    PARTIAL_LIMIT = 5
    SUGGESTION_MIN_DURATION = 30
    SUGGESTION_LIMIT = 10

    def is_perfect(self, candidate: CandidateMatch) -> bool:
        return (
            candidate.score >= self.PERFECT_MIN_SCORE
            and candidate.duration_minutes >= self.PERFECT_MIN_DURATION
        )

    def is_partial(self, candidate: CandidateMatch) -> bool:
        return (
            candidate.score >= self.PARTIAL_MIN_SCORE
            and candidate.duration_minutes >= self.PARTIAL_MIN_DURATION
        )

    def is_suggestion(self, candidate: CandidateMatch) -> bool:
        return candidate.duration_minutes >= self.SUGGESTION_MIN_DURATION

    def classify(self, candidates: List[CandidateMatch]) -> ClassifiedMatches:
        """
        Classify candidates into tiers.

        Candidates are re-sorted with the deterministic ranking, so the input
        order does not matter.
        """
        ranked = sort_candidates(candidates)

        perfect = next((c for c in ranked if self.is_perfect(c)), None)
        partial = [c for c in ranked if self.is_partial(c)][:self.PARTIAL_LIMIT]
        suggestions = [c for c in ranked if self.is_suggestion(c)][:self.SUGGESTION_LIMIT]

        logger.debug("candidates_classified",
                     total=len(ranked),
                     perfect=perfect is not None,
                     partial=len(partial),
                     suggestions=len(suggestions))

        return ClassifiedMatches(
            perfect_match=perfect,
            partial_matches=partial,
            suggestions=suggestions,
        )
