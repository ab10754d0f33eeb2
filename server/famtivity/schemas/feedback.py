"""Feedback-related Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .common import WholeNumber


class FeedbackInput(BaseModel):
    """Ratings and comments for a booking."""

    family_id: str = Field(..., min_length=1, description="Family leaving feedback")
    child_id: str = Field(..., min_length=1, description="Child who attended")
    activity_id: str = Field(..., min_length=1, description="Activity attended")
    overall_rating: WholeNumber = Field(..., ge=1, le=5, description="Overall rating (1-5)")
    child_enjoyment: WholeNumber = Field(..., ge=1, le=5, description="Child enjoyment rating (1-5)")
    value_for_money: WholeNumber = Field(..., ge=1, le=5, description="Value for money rating (1-5)")
    comments: Optional[str] = Field(None, max_length=2000, description="Free-text comments")

    def to_row(self, booking_id: str) -> dict[str, Any]:
        return {
            "booking_id": booking_id,
            "family_id": self.family_id,
            "child_id": self.child_id,
            "activity_id": self.activity_id,
            "overall_rating": self.overall_rating,
            "child_enjoyment": self.child_enjoyment,
            "value_for_money": self.value_for_money,
            "comments": self.comments,
        }


class SubmitFeedbackRequest(FeedbackInput):
    """Request schema for submitting feedback over HTTP."""

    booking_id: str = Field(..., min_length=1, description="Booking the feedback is for")
