"""Dashboard service aggregating a family's profile, recommendations and bookings."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from ..backend import DataBackend, Embed, Order, Row, SelectQuery, eq, gte, in_
from ..core.exceptions import BackendError, NotFoundError
from ..models.booking import BookingStatus
from ..schemas.common import Envelope, validate_payload
from ..schemas.dashboard import DashboardRequest, FamilyDashboard
from .common import failure

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 10
UPCOMING_BOOKING_LIMIT = 5


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DashboardService:
    """Service for the family dashboard read."""

    def __init__(self, backend: DataBackend, clock: Callable[[], datetime] = utc_now):
        self.backend = backend
        self.clock = clock

    async def get_family_dashboard(self, email: str) -> Envelope:
        """
        Load the dashboard for the family registered under ``email``.

        The family profile is read first; recommendations and upcoming
        bookings only depend on it and are read concurrently. Any failed read
        fails the whole dashboard.

        Args:
            email: Email of the family's waitlist entry

        Returns:
            Envelope with a ``FamilyDashboard``
        """
        try:
            request = validate_payload(DashboardRequest, {"email": email})
            family = await self._family(request.email)
            child_ids = [child["id"] for child in family.get("children") or []]

            recommendations, bookings = await asyncio.gather(
                self._recommendations(child_ids),
                self._upcoming_bookings(family["id"]),
            )
        except BackendError as e:
            return failure("get_family_dashboard", e)

        logger.info(
            "Family dashboard loaded",
            extra={
                "family_id": str(family["id"]),
                "children_count": len(child_ids),
                "recommendations_count": len(recommendations),
                "upcoming_bookings_count": len(bookings),
            }
        )

        return Envelope.ok(
            FamilyDashboard(
                family=family,
                recommendations=recommendations,
                upcoming_bookings=bookings,
            )
        )

    async def _family(self, email: str) -> Row:
        query = SelectQuery(
            table="family_profiles",
            embeds=(
                Embed("waitlist", columns=("email",), inner=True),
                Embed("children"),
            ),
            filters=(eq("waitlist.email", email),),
        )
        try:
            return await self.backend.select_one(query)
        except NotFoundError:
            raise NotFoundError(
                resource_type="family profile",
                detail=f"No family profile is registered for {email}",
            ) from None

    async def _recommendations(self, child_ids: list) -> list[Row]:
        if not child_ids:
            return []
        return await self.backend.select(
            SelectQuery(
                table="activity_recommendations",
                embeds=(Embed("activities"),),
                filters=(in_("child_id", child_ids),),
                order=(Order("match_score", ascending=False),),
                limit=RECOMMENDATION_LIMIT,
            )
        )

    async def _upcoming_bookings(self, family_id) -> list[Row]:
        return await self.backend.select(
            SelectQuery(
                table="bookings",
                embeds=(Embed("activities"), Embed("children")),
                filters=(
                    eq("family_id", family_id),
                    eq("status", BookingStatus.CONFIRMED.value),
                    gte("start_date", self.clock()),
                ),
                order=(Order("start_date"),),
                limit=UPCOMING_BOOKING_LIMIT,
            )
        )
