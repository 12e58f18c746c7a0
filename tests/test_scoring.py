"""
Tests for candidate match scoring
"""

from datetime import date, datetime, timedelta

import pytest

from app.services.matching import (
    TIME_OF_DAY_FROM_DATE,
    score_candidate,
    score_date_proximity,
    score_duration,
    score_time_of_day,
)


class TestComponents:

    @pytest.mark.parametrize("minutes,points", [
        (300, 60), (240, 60), (239, 50), (180, 50), (150, 40),
        (120, 40), (119, 25), (60, 25), (59, 10), (1, 10),
    ])
    def test_duration_steps(self, minutes, points):
        assert score_duration(minutes) == points

    def test_duration_is_monotonic(self):
        scores = [score_duration(m) for m in range(0, 400, 5)]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("days,points", [
        (0, 25), (7, 25), (8, 20), (14, 20), (15, 15), (30, 15), (31, 5), (120, 5),
    ])
    def test_date_proximity_steps(self, days, points):
        today = date(2025, 6, 8)
        assert score_date_proximity(today + timedelta(days=days), today) == points

    def test_date_proximity_counts_past_dates_by_distance(self):
        today = date(2025, 6, 8)
        assert score_date_proximity(today - timedelta(days=3), today) == 25

    @pytest.mark.parametrize("hour,points", [
        (9, 15), (12, 15), (17, 15), (8, 10), (18, 10), (7, 5), (19, 5), (0, 5),
    ])
    def test_time_of_day_bounds_inclusive(self, hour, points):
        assert score_time_of_day(hour) == points


class TestScoreCandidate:

    def test_reference_scenario(self):
        """150 minute overlap starting 10:00, two days away."""
        score, details = score_candidate(
            duration_minutes=150,
            candidate_date=date(2025, 6, 10),
            reference_now=date(2025, 6, 8),
            overlap_start=600,
        )

        assert score == 80
        assert details["components"] == {"duration": 40, "date_proximity": 25, "time_of_day": 15}
        assert details["hour"] == 10

    def test_date_source_reads_midnight(self):
        score, details = score_candidate(
            duration_minutes=150,
            candidate_date=date(2025, 6, 10),
            reference_now=date(2025, 6, 8),
            overlap_start=600,
            time_of_day_source=TIME_OF_DAY_FROM_DATE,
        )

        assert score == 70
        assert details["hour"] == 0
        assert details["hour_source"] == TIME_OF_DAY_FROM_DATE

    def test_accepts_datetime_reference(self):
        score, _ = score_candidate(240, date(2025, 6, 10), datetime(2025, 6, 8, 23, 59), overlap_start=540)
        assert score == 100

    def test_score_bounded(self):
        score, _ = score_candidate(600, date(2025, 6, 8), date(2025, 6, 8), overlap_start=600)
        assert 0 <= score <= 100

        score, _ = score_candidate(1, date(2026, 6, 8), date(2025, 6, 8), overlap_start=0)
        assert score == 10 + 5 + 5
