"""Waitlist-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .common import EMAIL_PATTERN, WholeNumber

WAITLIST_SOURCE = "website"


class WaitlistSignupRequest(BaseModel):
    """Request schema for joining the waitlist."""

    model_config = {"str_strip_whitespace": True}

    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN, description="Contact email, unique per entry")
    first_name: str = Field(..., min_length=1, max_length=100, description="Parent first name")
    zip_code: str = Field(..., pattern=r"^\d{5}(-\d{4})?$", description="US ZIP code")
    family_size: WholeNumber = Field(..., ge=1, le=20, description="Number of people in the family")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_row(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "first_name": self.first_name,
            "zip_code": self.zip_code,
            "family_size": self.family_size,
            "source": WAITLIST_SOURCE,
        }
