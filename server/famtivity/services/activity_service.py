"""Activity search service."""

import logging
from typing import Any, Mapping

from ..backend import DataBackend
from ..core.exceptions import BackendError
from ..schemas.activity import ActivitySearchFilters, GeoProcedureQuery
from ..schemas.common import Envelope, validate_payload
from .common import failure

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for activity-related reads."""

    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def search_activities(
        self, filters: ActivitySearchFilters | Mapping[str, Any] | None = None
    ) -> Envelope:
        """
        Search active activities.

        With a full location (latitude, longitude and distance) the search runs
        through the backend's distance procedure; the category, age and price
        criteria still apply to the rows it returns. Without one it is a
        filtered read of the activities table.

        Args:
            filters: Optional search criteria

        Returns:
            Envelope with the matching activity rows
        """
        try:
            criteria = validate_payload(ActivitySearchFilters, filters or {})
            query = criteria.to_query()

            if isinstance(query, GeoProcedureQuery):
                rows = await self.backend.rpc(query.to_call())
            else:
                rows = await self.backend.select(query.to_select())
        except BackendError as e:
            return failure("search_activities", e)

        logger.info(
            "Activity search completed",
            extra={
                "strategy": type(query).__name__,
                "filter_count": len(query.filters),
                "result_count": len(rows),
            }
        )
        return Envelope.ok(rows)
