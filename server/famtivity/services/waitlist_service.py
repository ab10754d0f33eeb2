"""Waitlist service for signup writes."""

import logging
from typing import Any, Mapping

from ..backend import DataBackend
from ..core.exceptions import BackendError
from ..core.observability import metrics_collector
from ..schemas.common import Envelope, validate_payload
from ..schemas.waitlist import WaitlistSignupRequest
from .common import failure, single_row

logger = logging.getLogger(__name__)

WAITLIST_TABLE = "waitlist"


class WaitlistService:
    """Service for waitlist-related operations."""

    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def submit_to_waitlist(
        self, form_data: WaitlistSignupRequest | Mapping[str, Any]
    ) -> Envelope:
        """
        Add a prospective family to the waitlist.

        There is no idempotency key: a repeated email is rejected by the
        table's unique constraint and comes back as a ``CONFLICT`` failure.

        Args:
            form_data: Email, first name, ZIP code and family size

        Returns:
            Envelope with the inserted waitlist row
        """
        try:
            request = validate_payload(WaitlistSignupRequest, form_data)
            rows = await self.backend.insert(WAITLIST_TABLE, [request.to_row()])
            entry = single_row(rows, WAITLIST_TABLE)
        except BackendError as e:
            return failure("submit_to_waitlist", e)

        metrics_collector.record_waitlist_signup()
        logger.info(
            "Waitlist entry created",
            extra={
                "waitlist_entry_id": str(entry.get("id")),
                "family_size": entry.get("family_size"),
            }
        )
        return Envelope.ok(entry, status_code=201)
