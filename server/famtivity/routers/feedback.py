"""Feedback router."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..backend import DataBackend
from ..core.dependencies import BackendDependency
from ..schemas.common import Envelope
from ..schemas.feedback import SubmitFeedbackRequest
from ..services.feedback_service import FeedbackService
from .responses import envelope_response

router = APIRouter(prefix="/v1/feedback", tags=["feedback"])


@router.post("/submit", response_model=Envelope)
async def submit_feedback(
    request: SubmitFeedbackRequest,
    backend: DataBackend = BackendDependency,
) -> JSONResponse:
    """Record ratings and comments for a booking."""
    envelope = await FeedbackService(backend).submit_feedback(request.booking_id, request)
    return envelope_response(envelope)
