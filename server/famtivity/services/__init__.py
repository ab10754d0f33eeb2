"""Service layer package."""

from .activity_service import ActivityService
from .auth_service import AuthService
from .booking_service import BookingService
from .dashboard_service import DashboardService
from .feedback_service import FeedbackService
from .onboarding_service import OnboardingService
from .waitlist_service import WaitlistService

__all__ = [
    "ActivityService",
    "AuthService",
    "BookingService",
    "DashboardService",
    "FeedbackService",
    "OnboardingService",
    "WaitlistService",
]
