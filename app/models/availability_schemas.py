"""
Pydantic schemas for availability submission, matching and slot selection
"""

import re
import datetime as dt
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from app.config import settings
from app.services.matching import format_minutes, parse_hhmm

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class TimeSlotIn(BaseModel):
    """
    One time window on a calendar date.

    Accepts both snake_case and the camelCase keys sent by the web client.
    """
    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    start_time: str = Field(..., validation_alias=AliasChoices("start_time", "startTime"))
    end_time: str = Field(..., validation_alias=AliasChoices("end_time", "endTime"))

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time_format(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError(f"Invalid time format: {value!r} (HH:MM expected)")
        # Normalize "9:00" -> "09:00"
        return format_minutes(parse_hhmm(value))

    @model_validator(mode="after")
    def check_window(self):
        if parse_hhmm(self.start_time) >= parse_hhmm(self.end_time):
            raise ValueError(f"End time must be after start time: {self.start_time} - {self.end_time}")
        if self.date < dt.date.today():
            raise ValueError(f"Date is in the past: {self.date.isoformat()}")
        return self


class AvailabilitySlotIn(TimeSlotIn):
    """Declared availability; additionally bounded by the planning horizon."""

    @model_validator(mode="after")
    def check_horizon(self):
        horizon = dt.date.today() + dt.timedelta(days=settings.availability_max_horizon_days)
        if self.date > horizon:
            raise ValueError(
                f"Date too far in the future (max {settings.availability_max_horizon_days} days): "
                f"{self.date.isoformat()}"
            )
        return self


class AvailabilitySubmission(BaseModel):
    """Full replacement set of a participant's availabilities."""
    availabilities: List[AvailabilitySlotIn] = Field(
        default_factory=list,
        validation_alias=AliasChoices("availabilities", "tenantAvailabilities", "tenant_availabilities"),
    )


class AvailabilityOut(BaseModel):
    """Stored availability row."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")


class SubmissionResponse(BaseModel):
    """Response returned after an availability submission"""
    success: bool
    message: str
    availabilities_count: int
    matching: Optional[dict[str, Any]] = None


class SlotSelectionRequest(BaseModel):
    """Manual choice of a slot for an intervention"""
    model_config = ConfigDict(populate_by_name=True)

    selected_slot: TimeSlotIn = Field(..., validation_alias=AliasChoices("selected_slot", "selectedSlot"))
    comment: Optional[str] = None
