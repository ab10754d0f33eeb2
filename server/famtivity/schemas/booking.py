"""Booking-related Pydantic schemas."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..models.booking import BookingStatus


class BookActivityRequest(BaseModel):
    """Request schema for booking an activity. New bookings are always pending."""

    family_id: str = Field(..., min_length=1, description="Booking family")
    activity_id: str = Field(..., min_length=1, description="Activity to book")
    child_id: str = Field(..., min_length=1, description="Child attending")
    start_date: datetime = Field(..., description="First session start time (ISO 8601)")

    @field_validator("start_date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_row(self) -> dict[str, Any]:
        return {
            "family_id": self.family_id,
            "activity_id": self.activity_id,
            "child_id": self.child_id,
            "status": BookingStatus.PENDING.value,
            "start_date": self.start_date,
        }
