"""Feedback service."""

import logging
from typing import Any, Mapping

from ..backend import DataBackend
from ..core.exceptions import BackendError, ValidationError
from ..core.observability import metrics_collector
from ..schemas.common import Envelope, validate_payload
from ..schemas.feedback import FeedbackInput
from .common import failure, single_row

logger = logging.getLogger(__name__)

FEEDBACK_TABLE = "activity_feedback"


class FeedbackService:
    """Service for activity feedback writes."""

    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def submit_feedback(
        self, booking_id: str, feedback_data: FeedbackInput | Mapping[str, Any]
    ) -> Envelope:
        """Record feedback for a booking. Booking eligibility is not checked."""
        try:
            if not booking_id:
                raise ValidationError(
                    detail="booking_id is required",
                    violations=[{"path": "booking_id", "message": "Field required"}],
                )
            feedback = validate_payload(FeedbackInput, feedback_data)
            rows = await self.backend.insert(FEEDBACK_TABLE, [feedback.to_row(str(booking_id))])
            row = single_row(rows, FEEDBACK_TABLE)
        except BackendError as e:
            return failure("submit_feedback", e, booking_id=str(booking_id))

        metrics_collector.record_feedback_submitted()
        logger.info(
            "Feedback submitted",
            extra={
                "feedback_id": str(row.get("id")),
                "booking_id": str(booking_id),
                "overall_rating": feedback.overall_rating,
            }
        )
        return Envelope.ok(row, status_code=201)
