"""Waitlist router for signup operations."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..backend import DataBackend
from ..core.dependencies import BackendDependency
from ..schemas.common import Envelope
from ..schemas.waitlist import WaitlistSignupRequest
from ..services.waitlist_service import WaitlistService
from .responses import envelope_response

router = APIRouter(prefix="/v1/waitlist", tags=["waitlist"])


@router.post("/submit", response_model=Envelope)
async def submit_to_waitlist(
    request: WaitlistSignupRequest,
    backend: DataBackend = BackendDependency,
) -> JSONResponse:
    """
    Join the waitlist.

    Not idempotent: a second submission for the same email is a conflict.
    """
    envelope = await WaitlistService(backend).submit_to_waitlist(request)
    return envelope_response(envelope)
