"""
Time Intervals and Overlap Calculation

Availability windows are handled as [start, end) intervals expressed in
minutes since midnight on a single calendar date. The overlap calculator is
date-agnostic: callers only pair intervals that share a date.
"""

from dataclasses import dataclass
from datetime import date as date_type, time
from typing import Union

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: Union[str, time]) -> int:
    """
    Convert "HH:MM" (or a datetime.time) to minutes since midnight.

    Raises ValueError for malformed strings or out-of-range components.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    parts = value.strip().split(":")
    # "HH:MM:SS" as returned by some drivers is accepted, seconds are dropped
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time format: {value!r} (HH:MM expected)")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Convert minutes since midnight back to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_to_time(minutes: int) -> time:
    return time(hour=minutes // 60, minute=minutes % 60)


@dataclass(frozen=True)
class TimeInterval:
    """
    [start, end) interval in minutes since midnight.

    Well-formedness (start < end) is guaranteed by the validation boundary;
    the calculator does not re-check it.
    """
    start: int
    end: int

    @classmethod
    def from_strings(cls, start_time: Union[str, time], end_time: Union[str, time]) -> "TimeInterval":
        return cls(parse_hhmm(start_time), parse_hhmm(end_time))

    @property
    def duration_minutes(self) -> int:
        return max(0, self.end - self.start)

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{format_minutes(self.start)}-{format_minutes(self.end)}"


@dataclass(frozen=True)
class Overlap:
    """Intersection of two intervals; duration 0 when they are disjoint."""
    start: int
    end: int
    duration_minutes: int

    @property
    def is_empty(self) -> bool:
        return self.duration_minutes == 0


def overlap(a: TimeInterval, b: TimeInterval) -> Overlap:
    """
    Compute the intersection of two same-date intervals.

    start = max(starts), end = min(ends), duration clamped at 0.
    Symmetric: overlap(a, b) == overlap(b, a).

    Example:
        >>> overlap(TimeInterval(540, 600), TimeInterval(570, 630))
        Overlap(start=570, end=600, duration_minutes=30)
    """
    start = max(a.start, b.start)
    end = min(a.end, b.end)
    return Overlap(start=start, end=end, duration_minutes=max(0, end - start))


def days_between(a: date_type, b: date_type) -> int:
    """Absolute number of calendar days between two dates."""
    return abs((a - b).days)
