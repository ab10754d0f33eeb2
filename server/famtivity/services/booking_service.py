"""Booking service for creating pending bookings."""

import logging
from datetime import datetime

from ..backend import DataBackend
from ..core.exceptions import BackendError
from ..core.observability import metrics_collector
from ..schemas.booking import BookActivityRequest
from ..schemas.common import Envelope, validate_payload
from .common import failure, single_row

logger = logging.getLogger(__name__)

BOOKINGS_TABLE = "bookings"


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def book_activity(
        self,
        family_id: str,
        activity_id: str,
        child_id: str,
        start_date: datetime | str,
    ) -> Envelope:
        """
        Create a pending booking.

        No availability or capacity check happens here; the referenced
        family, activity and child must exist in the backend.

        Returns:
            Envelope with the inserted booking row (status ``pending``)
        """
        try:
            request = validate_payload(
                BookActivityRequest,
                {
                    "family_id": family_id,
                    "activity_id": activity_id,
                    "child_id": child_id,
                    "start_date": start_date,
                },
            )
            rows = await self.backend.insert(BOOKINGS_TABLE, [request.to_row()])
            booking = single_row(rows, BOOKINGS_TABLE)
        except BackendError as e:
            return failure(
                "book_activity", e, family_id=str(family_id), activity_id=str(activity_id)
            )

        metrics_collector.record_booking_created()
        logger.info(
            "Booking created",
            extra={
                "booking_id": str(booking.get("id")),
                "family_id": request.family_id,
                "activity_id": request.activity_id,
                "child_id": request.child_id,
                "start_date": request.start_date.isoformat(),
            }
        )
        return Envelope.ok(booking, status_code=201)
