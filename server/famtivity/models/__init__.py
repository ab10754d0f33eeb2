"""Models module exporting all table definitions."""

from .activity import Activity, ActivityRecommendation
from .booking import Booking, BookingStatus
from .family import Child, FamilyProfile
from .feedback import ActivityFeedback
from .waitlist import WaitlistEntry

__all__ = [
    # Signup and onboarding
    "WaitlistEntry",
    "FamilyProfile",
    "Child",

    # Catalogue
    "Activity",
    "ActivityRecommendation",

    # Bookings
    "Booking",
    "BookingStatus",
    "ActivityFeedback",
]
