"""
Match Persistence Gateway
Stores the latest matching run of an intervention
"""

from datetime import date, timedelta
from typing import List, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from app.models.availability_match import AvailabilityMatch
from app.services.matching import CandidateMatch, MatchTier, minutes_to_time

logger = structlog.get_logger(__name__)


class MatchPersistenceGateway:
    """
    Clear-then-insert storage of candidate matches.

    Previously stored matches for an intervention are always dropped before
    the new set is written; sets are never merged.
    """

    def __init__(self, db: Session):
        self.db = db

    def replace_matches(
        self,
        intervention_id: str,
        matches: List[Tuple[CandidateMatch, MatchTier]],
    ) -> List[AvailabilityMatch]:
        """
        Replace the stored matches of an intervention.

        Args:
            intervention_id: Intervention the run belongs to
            matches: Ranked (candidate, tier) pairs, best first

        Returns:
            Inserted rows (flushed, not committed)
        """
        cleared = self.clear_matches(intervention_id)

        rows = []
        for rank, (candidate, tier) in enumerate(matches, 1):
            row = AvailabilityMatch(
                intervention_id=intervention_id,
                matched_date=candidate.date,
                matched_start_time=minutes_to_time(candidate.overlap_start),
                matched_end_time=minutes_to_time(candidate.overlap_end),
                overlap_duration=candidate.duration_minutes,
                participant_user_ids=list(candidate.participants),
                match_score=candidate.score,
                tier=tier.value,
                rank=rank,
                is_perfect=(tier == MatchTier.PERFECT),
            )
            self.db.add(row)
            rows.append(row)

        self.db.flush()

        logger.info("matches_replaced",
                    intervention_id=intervention_id,
                    cleared=cleared,
                    stored=len(rows))
        return rows

    def clear_matches(self, intervention_id: str) -> int:
        return self.db.query(AvailabilityMatch).filter(
            AvailabilityMatch.intervention_id == intervention_id
        ).delete(synchronize_session=False)

    def list_matches(self, intervention_id: str, tier: Optional[str] = None) -> List[AvailabilityMatch]:
        query = self.db.query(AvailabilityMatch).filter(
            AvailabilityMatch.intervention_id == intervention_id
        )
        if tier:
            query = query.filter(AvailabilityMatch.tier == tier)
        return query.order_by(AvailabilityMatch.rank.asc()).all()

    def purge_stale(self, retention_days: int, today: Optional[date] = None) -> int:
        """
        Delete stored matches whose date is older than the retention window.

        Called by the scheduler to keep the table bounded.
        """
        cutoff = (today or date.today()) - timedelta(days=retention_days)
        deleted = self.db.query(AvailabilityMatch).filter(
            AvailabilityMatch.matched_date < cutoff
        ).delete(synchronize_session=False)

        logger.info("stale_matches_purged", cutoff=cutoff.isoformat(), deleted=deleted)
        return deleted
