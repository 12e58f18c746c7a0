"""
Tests for MatchClassifier tiering
"""

from datetime import date

from app.services.matching import CandidateMatch, MatchClassifier, MatchTier, sort_candidates


def make_candidate(score, duration, day=10, start=600, tenant="t1", provider="p1"):
    return CandidateMatch(
        date=date(2025, 6, day),
        overlap_start=start,
        overlap_end=start + duration,
        duration_minutes=duration,
        participants=[tenant, provider],
        score=score,
    )


class TestThresholds:

    def test_perfect_boundary(self):
        classifier = MatchClassifier()

        assert classifier.is_perfect(make_candidate(85, 120))
        assert not classifier.is_perfect(make_candidate(84, 120))
        assert not classifier.is_perfect(make_candidate(90, 119))

    def test_partial_boundary(self):
        classifier = MatchClassifier()

        assert classifier.is_partial(make_candidate(60, 60))
        assert not classifier.is_partial(make_candidate(59, 200))
        assert not classifier.is_partial(make_candidate(95, 59))

    def test_suggestion_boundary(self):
        classifier = MatchClassifier()

        assert classifier.is_suggestion(make_candidate(20, 30))
        assert not classifier.is_suggestion(make_candidate(100, 29))


class TestClassify:

    def test_at_most_one_perfect_and_it_is_the_best(self):
        candidates = [
            make_candidate(90, 180, day=12),
            make_candidate(95, 240, day=11),
            make_candidate(85, 120, day=10),
        ]

        classified = MatchClassifier().classify(candidates)

        assert classified.perfect_match.score == 95
        assert classified.tier_of(classified.perfect_match) == MatchTier.PERFECT

    def test_tiers_overlap(self):
        best = make_candidate(95, 240)
        classified = MatchClassifier().classify([best])

        assert classified.perfect_match is best
        assert best in classified.partial_matches
        assert best in classified.suggestions

    def test_limits(self):
        candidates = [make_candidate(70, 90, start=480 + i * 10, tenant=f"t{i}") for i in range(12)]

        classified = MatchClassifier().classify(candidates)

        assert classified.perfect_match is None
        assert len(classified.partial_matches) == 5
        assert len(classified.suggestions) == 10

    def test_short_overlaps_are_dropped(self):
        classified = MatchClassifier().classify([make_candidate(50, 15)])

        assert classified.perfect_match is None
        assert classified.partial_matches == []
        assert classified.suggestions == []

    def test_input_order_does_not_matter(self):
        candidates = [make_candidate(70, 90, day=d) for d in (14, 11, 12)]

        forward = MatchClassifier().classify(candidates)
        backward = MatchClassifier().classify(list(reversed(candidates)))

        assert [c.date for c in forward.partial_matches] == [c.date for c in backward.partial_matches]
        assert [c.date.day for c in forward.partial_matches] == [11, 12, 14]


class TestOrdering:

    def test_tie_break_by_date_start_and_participants(self):
        a = make_candidate(80, 120, day=11, start=600, tenant="t2")
        b = make_candidate(80, 120, day=10, start=660)
        c = make_candidate(80, 120, day=10, start=600, tenant="t2")
        d = make_candidate(80, 120, day=10, start=600, tenant="t1")
        e = make_candidate(90, 60, day=20)

        assert sort_candidates([a, b, c, d, e]) == [e, d, c, b, a]
