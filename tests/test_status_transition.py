"""
Tests for StatusTransitionTrigger and MatchPersistenceGateway

Side effects are best-effort: a failing match write or status update must
never propagate to the caller.
"""

from datetime import date, time, timedelta
from types import SimpleNamespace
from unittest.mock import Mock

from app.models import AvailabilityMatch, Intervention
from app.models.intervention import STATUS_PLANNING, STATUS_SCHEDULED
from app.services.availability_repository import AvailabilityRepository
from app.services.match_persistence import MatchPersistenceGateway
from app.services.status_transition import StatusTransitionTrigger


def declare(db_session, user_id, day, start, end):
    AvailabilityRepository(db_session).replace_availabilities(
        user_id, "intervention-1", [SimpleNamespace(date=day, start_time=start, end_time=end)]
    )


class TestAfterSubmit:

    def test_perfect_match_persists_and_schedules(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "09:00", "13:00")

        result = StatusTransitionTrigger(db_session).after_submit("intervention-1")
        db_session.commit()

        assert result.perfect_match is not None
        intervention = db_session.get(Intervention, "intervention-1")
        assert intervention.status == STATUS_SCHEDULED
        assert intervention.scheduled_time == time(9, 0)
        assert db_session.query(AvailabilityMatch).count() == 1

    def test_no_perfect_match_keeps_status(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "10:00", "12:30")

        result = StatusTransitionTrigger(db_session).after_submit("intervention-1")
        db_session.commit()

        assert result.perfect_match is None
        assert len(result.partial_matches) == 1
        assert db_session.get(Intervention, "intervention-1").status == STATUS_PLANNING

    def test_persistence_failure_is_swallowed(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "09:00", "13:00")
        gateway = Mock()
        gateway.replace_matches.side_effect = RuntimeError("disk full")

        result = StatusTransitionTrigger(db_session, match_gateway=gateway).after_submit("intervention-1")
        db_session.commit()

        assert result is not None
        assert result.perfect_match is not None
        # Scheduling still happens
        assert db_session.get(Intervention, "intervention-1").status == STATUS_SCHEDULED

    def test_status_update_failure_is_swallowed(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "09:00", "13:00")
        interventions = Mock()
        interventions.update_intervention_schedule.side_effect = RuntimeError("constraint violated")

        result = StatusTransitionTrigger(
            db_session, intervention_repository=interventions
        ).after_submit("intervention-1")
        db_session.commit()

        assert result.perfect_match is not None
        assert db_session.get(Intervention, "intervention-1").status == STATUS_PLANNING
        assert db_session.query(AvailabilityMatch).count() == 1

    def test_only_planned_interventions_are_auto_scheduled(self, db_session, participants, soon):
        participants["intervention"].status = "cloturee"
        db_session.commit()
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "09:00", "13:00")

        result = StatusTransitionTrigger(db_session).after_submit("intervention-1")
        db_session.commit()

        assert result.perfect_match is not None
        assert db_session.get(Intervention, "intervention-1").status == "cloturee"

    def test_matching_failure_returns_none(self, db_session, participants):
        engine = Mock()
        engine.match.side_effect = ValueError("bad data")

        result = StatusTransitionTrigger(db_session, engine=engine).after_submit("intervention-1")

        assert result is None

    def test_rematch_clears_previous_matches(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "10:00", "12:30")
        trigger = StatusTransitionTrigger(db_session)
        trigger.after_submit("intervention-1")

        declare(db_session, "provider-1", soon + timedelta(days=1), "10:00", "12:30")
        result = trigger.after_submit("intervention-1")
        db_session.commit()

        assert result.success is False
        assert db_session.query(AvailabilityMatch).count() == 0


class TestMatchPersistenceGateway:

    def test_rank_and_tier(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "08:00", "18:00")
        AvailabilityRepository(db_session).replace_availabilities("provider-1", "intervention-1", [
            SimpleNamespace(date=soon, start_time="09:00", end_time="12:00"),
            SimpleNamespace(date=soon, start_time="17:00", end_time="17:45"),
        ])
        trigger = StatusTransitionTrigger(db_session)
        result = trigger.run_matching("intervention-1")

        trigger.store_matches("intervention-1", result)
        db_session.commit()

        rows = MatchPersistenceGateway(db_session).list_matches("intervention-1")
        assert [r.rank for r in rows] == [1, 2]
        assert [r.tier for r in rows] == ["perfect", "suggestion"]
        assert rows[0].is_perfect is True
        assert rows[1].matched_start_time == time(17, 0)

    def test_list_by_tier(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "08:00", "18:00")
        declare(db_session, "provider-1", soon, "09:00", "12:00")
        trigger = StatusTransitionTrigger(db_session)
        trigger.store_matches("intervention-1", trigger.run_matching("intervention-1"))

        gateway = MatchPersistenceGateway(db_session)
        assert len(gateway.list_matches("intervention-1", tier="perfect")) == 1
        assert gateway.list_matches("intervention-1", tier="partial") == []

    def test_purge_stale(self, db_session, participants):
        db_session.add_all([
            AvailabilityMatch(
                intervention_id="intervention-1",
                matched_date=day,
                matched_start_time=time(9, 0),
                matched_end_time=time(10, 0),
                overlap_duration=60,
                participant_user_ids=["tenant-1", "provider-1"],
                match_score=60,
                tier="partial",
                rank=rank,
            )
            for rank, day in enumerate([date(2025, 1, 1), date(2025, 6, 1)], 1)
        ])
        db_session.commit()

        deleted = MatchPersistenceGateway(db_session).purge_stale(30, today=date(2025, 6, 10))
        db_session.commit()

        assert deleted == 1
        assert db_session.query(AvailabilityMatch).one().matched_date == date(2025, 6, 1)
