"""
Self-conflict detection: a participant declaring two overlapping windows on
the same date. Reported alongside the matching result, never blocking.
"""

from collections import defaultdict
from typing import Dict, List, Sequence

from app.services.matching.intervals import format_minutes


def detect_conflicts(availabilities: Sequence) -> List[dict]:
    """
    Find dates on which one user's own slots overlap each other.

    Args:
        availabilities: Slots exposing user_id, date and interval

    Returns:
        List of {"user_id", "date", "slots": [{"start_time", "end_time"}]}
        sorted by user then date
    """
    by_user_date: Dict[tuple, list] = defaultdict(list)
    for slot in availabilities:
        by_user_date[(slot.user_id, slot.date)].append(slot.interval)

    conflicts = []
    for (user_id, day), intervals in sorted(by_user_date.items(), key=lambda item: (item[0][0], item[0][1])):
        if len(intervals) < 2:
            continue
        has_overlap = any(
            first.overlaps(second)
            for i, first in enumerate(intervals)
            for second in intervals[i + 1:]
        )
        if has_overlap:
            conflicts.append({
                "user_id": user_id,
                "date": day.isoformat(),
                "slots": [
                    {"start_time": format_minutes(iv.start), "end_time": format_minutes(iv.end)}
                    for iv in sorted(intervals, key=lambda iv: (iv.start, iv.end))
                ],
            })
    return conflicts
