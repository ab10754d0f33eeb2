"""Dashboard-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .common import EMAIL_PATTERN


class DashboardRequest(BaseModel):
    """Request schema for loading a family dashboard."""

    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN, description="Email of the family's waitlist entry")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class FamilyDashboard(BaseModel):
    """Aggregated dashboard for one family."""

    family: dict[str, Any] = Field(..., description="Family profile with waitlist email and children")
    recommendations: list[dict[str, Any]] = Field(default_factory=list, description="Top recommendations, best first")
    upcoming_bookings: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Next confirmed bookings, soonest first",
    )
