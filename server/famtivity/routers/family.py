"""Family router for onboarding and the dashboard."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..backend import DataBackend
from ..core.dependencies import BackendDependency
from ..schemas.common import Envelope
from ..schemas.dashboard import DashboardRequest
from ..schemas.onboarding import OnboardingRequest
from ..services.dashboard_service import DashboardService
from ..services.onboarding_service import OnboardingService
from .responses import envelope_response

router = APIRouter(prefix="/v1/family", tags=["family"])


@router.post("/onboard", response_model=Envelope)
async def complete_family_onboarding(
    request: OnboardingRequest,
    backend: DataBackend = BackendDependency,
) -> JSONResponse:
    """
    Convert a waitlist entry into a family account.

    Creates the family profile and children and marks the entry onboarded.
    Partial writes are undone when a later step fails.
    """
    envelope = await OnboardingService(backend).complete_family_onboarding(
        request.waitlist_id, request.family, request.children
    )
    return envelope_response(envelope)


@router.post("/dashboard", response_model=Envelope)
async def get_family_dashboard(
    request: DashboardRequest,
    backend: DataBackend = BackendDependency,
) -> JSONResponse:
    """Load a family's profile, top recommendations and upcoming bookings."""
    envelope = await DashboardService(backend).get_family_dashboard(request.email)
    return envelope_response(envelope)
