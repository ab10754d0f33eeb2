"""Onboarding-related Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .common import AmountText, WholeNumber


class FamilyProfileInput(BaseModel):
    """Family preferences collected during onboarding."""

    monthly_budget: Optional[AmountText] = Field(None, max_length=50, description="Monthly budget, an amount or a band such as '100-250'")
    max_travel: WholeNumber = Field(..., ge=0, le=500, description="Maximum travel distance")
    preferred_times: list[str] = Field(default_factory=list, description="Preferred time windows")

    def to_row(self, waitlist_id: str) -> dict[str, Any]:
        return {
            "waitlist_id": waitlist_id,
            "monthly_budget": self.monthly_budget,
            "max_travel_distance": self.max_travel,
            "preferred_times": self.preferred_times,
        }


class ChildInput(BaseModel):
    """One child supplied during onboarding."""

    name: Optional[str] = Field(None, max_length=100, description="Child name (optional)")
    age: WholeNumber = Field(..., ge=0, le=18, description="Child age in years")
    interests: list[str] = Field(default_factory=list, description="Interest tags")
    energy_level: Optional[str] = Field(None, max_length=20, description="Energy level label")

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_row(self, family_id: str) -> dict[str, Any]:
        return {
            "family_id": family_id,
            "name": self.name,
            "age": self.age,
            "interests": self.interests,
            "energy_level": self.energy_level,
        }


class OnboardingRequest(BaseModel):
    """Request schema for completing family onboarding."""

    waitlist_id: str = Field(..., min_length=1, description="Waitlist entry being converted")
    family: FamilyProfileInput = Field(..., description="Family profile data")
    children: list[ChildInput] = Field(default_factory=list, description="Children to create")


class OnboardingResult(BaseModel):
    """Rows written by a completed onboarding."""

    family_id: str = Field(..., description="Created family profile ID")
    family: dict[str, Any] = Field(..., description="Created family profile row")
    children: list[dict[str, Any]] = Field(default_factory=list, description="Created child rows")
