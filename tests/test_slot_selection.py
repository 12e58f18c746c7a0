"""
Tests for SlotSelectionService
"""

from datetime import time, timedelta
from types import SimpleNamespace

import pytest

from app.models import AvailabilityMatch, Intervention
from app.models.intervention import STATUS_APPROVED, STATUS_SCHEDULED
from app.services.availability_repository import AvailabilityRepository
from app.services.errors import InvalidInterventionStatus, ParticipantAccessDenied
from app.services.slot_selection import SlotSelectionService
from app.services.status_transition import StatusTransitionTrigger


def declare(db_session, user_id, day, start, end):
    AvailabilityRepository(db_session).replace_availabilities(
        user_id, "intervention-1", [SimpleNamespace(date=day, start_time=start, end_time=end)]
    )


class TestSelectSlot:

    def test_schedules_and_clears_matches(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "13:00")
        declare(db_session, "provider-1", soon, "10:00", "12:30")
        trigger = StatusTransitionTrigger(db_session)
        trigger.store_matches("intervention-1", trigger.run_matching("intervention-1"))
        db_session.commit()
        assert db_session.query(AvailabilityMatch).count() == 1

        outcome = SlotSelectionService(db_session).select_slot(
            "manager-1", "intervention-1", soon, "10:00", "12:00", comment="Confirmed by phone"
        )

        intervention = db_session.get(Intervention, "intervention-1")
        assert intervention.status == STATUS_SCHEDULED
        assert intervention.scheduled_date == soon
        assert intervention.scheduled_time == time(10, 0)
        assert "Confirmed by phone" in intervention.manager_comment
        assert "10:00-12:00" in intervention.manager_comment
        assert db_session.query(AvailabilityMatch).count() == 0
        assert outcome.rescheduled is False
        assert sorted(outcome.available_user_ids) == ["provider-1", "tenant-1"]
        assert outcome.conflicting_user_ids == []

    def test_reports_conflicting_participants(self, db_session, participants, soon):
        declare(db_session, "tenant-1", soon, "09:00", "11:00")
        declare(db_session, "provider-1", soon, "14:00", "16:00")
        db_session.commit()

        outcome = SlotSelectionService(db_session).select_slot(
            "tenant-1", "intervention-1", soon, "10:00", "11:00"
        )

        assert outcome.available_user_ids == ["tenant-1"]
        assert outcome.conflicting_user_ids == ["provider-1"]

    def test_reschedule_from_scheduled(self, db_session, participants, soon):
        service = SlotSelectionService(db_session)
        service.select_slot("tenant-1", "intervention-1", soon, "09:00", "10:00")

        outcome = service.select_slot("tenant-1", "intervention-1", soon + timedelta(days=1), "14:00", "15:00")

        assert outcome.rescheduled is True
        assert outcome.intervention.scheduled_time == time(14, 0)

    def test_approved_status_allowed(self, db_session, participants, soon):
        participants["intervention"].status = STATUS_APPROVED
        db_session.commit()

        outcome = SlotSelectionService(db_session).select_slot(
            "provider-1", "intervention-1", soon, "09:00", "10:00"
        )

        assert outcome.intervention.status == STATUS_SCHEDULED

    def test_invalid_status(self, db_session, participants, soon):
        participants["intervention"].status = "terminee"
        db_session.commit()

        with pytest.raises(InvalidInterventionStatus):
            SlotSelectionService(db_session).select_slot("tenant-1", "intervention-1", soon, "09:00", "10:00")

    def test_outsider_rejected(self, db_session, participants, soon):
        with pytest.raises(ParticipantAccessDenied):
            SlotSelectionService(db_session).select_slot("provider-2", "intervention-1", soon, "09:00", "10:00")
