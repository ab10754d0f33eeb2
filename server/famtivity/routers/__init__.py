"""FastAPI routers package."""

from .activity import router as activity_router
from .auth import router as auth_router
from .booking import router as booking_router
from .family import router as family_router
from .feedback import router as feedback_router
from .waitlist import router as waitlist_router

__all__ = [
    "activity_router",
    "auth_router",
    "booking_router",
    "family_router",
    "feedback_router",
    "waitlist_router",
]
