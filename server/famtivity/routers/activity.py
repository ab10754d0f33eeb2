"""Activity router for search."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..backend import DataBackend
from ..core.dependencies import BackendDependency
from ..schemas.activity import ActivitySearchFilters
from ..schemas.common import Envelope
from ..services.activity_service import ActivityService
from .responses import envelope_response

router = APIRouter(prefix="/v1/activity", tags=["activity"])


@router.post("/search", response_model=Envelope)
async def search_activities(
    request: ActivitySearchFilters,
    backend: DataBackend = BackendDependency,
) -> JSONResponse:
    """Search active activities by category, age, price and optionally distance."""
    envelope = await ActivityService(backend).search_activities(request)
    return envelope_response(envelope)
