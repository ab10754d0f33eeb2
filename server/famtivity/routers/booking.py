"""Booking router for booking operations."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..backend import DataBackend
from ..core.dependencies import BackendDependency
from ..schemas.booking import BookActivityRequest
from ..schemas.common import Envelope
from ..services.booking_service import BookingService
from .responses import envelope_response

router = APIRouter(prefix="/v1/booking", tags=["booking"])


@router.post("/create", response_model=Envelope)
async def book_activity(
    request: BookActivityRequest,
    backend: DataBackend = BackendDependency,
) -> JSONResponse:
    """
    Book an activity for a child.

    New bookings are always ``pending``; any status in the request is ignored.
    """
    envelope = await BookingService(backend).book_activity(
        request.family_id, request.activity_id, request.child_id, request.start_date
    )
    return envelope_response(envelope)
