"""Onboarding service converting a waitlist entry into a family account."""

import logging
from typing import Any, Iterable, Mapping

from ..backend import DataBackend, Filter, eq
from ..core.exceptions import BackendError, NotFoundError
from ..core.observability import metrics_collector
from ..schemas.common import Envelope, validate_payload
from ..schemas.onboarding import (
    ChildInput,
    FamilyProfileInput,
    OnboardingRequest,
    OnboardingResult,
)
from .common import failure, single_row

logger = logging.getLogger(__name__)

FAMILY_TABLE = "family_profiles"
CHILDREN_TABLE = "children"
WAITLIST_TABLE = "waitlist"

FAMILY_ROLE = "family"


class OnboardingService:
    """
    Service for the three-step onboarding sequence.

    The steps are separate backend writes, so the sequence runs as a saga:
    each completed step registers a compensating delete, and a later failure
    replays them newest first before the failure is reported.
    """

    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def complete_family_onboarding(
        self,
        waitlist_id: str,
        family_data: FamilyProfileInput | Mapping[str, Any],
        children_data: Iterable[ChildInput | Mapping[str, Any]] | None,
    ) -> Envelope:
        """
        Create the family profile and children, then mark the entry onboarded.

        Args:
            waitlist_id: Waitlist entry being converted
            family_data: Budget, maximum travel distance and preferred times
            children_data: One entry per child

        Returns:
            Envelope with an ``OnboardingResult``; on failure no family or
            child rows written by this call remain, unless compensation itself
            failed, which is flagged as ``details.compensation_failed``
        """
        compensations: list[tuple[str, list[Filter]]] = []

        try:
            request = validate_payload(
                OnboardingRequest,
                {
                    "waitlist_id": waitlist_id,
                    "family": family_data,
                    "children": list(children_data or []),
                },
            )

            family_rows = await self.backend.insert(
                FAMILY_TABLE, [request.family.to_row(request.waitlist_id)]
            )
            family = single_row(family_rows, FAMILY_TABLE)
            family_id = str(family["id"])
            compensations.append((FAMILY_TABLE, [eq("id", family_id)]))

            children: list[dict[str, Any]] = []
            if request.children:
                compensations.append((CHILDREN_TABLE, [eq("family_id", family_id)]))
                children = await self.backend.insert(
                    CHILDREN_TABLE, [child.to_row(family_id) for child in request.children]
                )

            updated = await self.backend.update(
                WAITLIST_TABLE,
                {"user_role": FAMILY_ROLE, "completed_onboarding": True},
                [eq("id", request.waitlist_id)],
            )
            if not updated:
                raise NotFoundError(resource_type="waitlist entry", resource_id=request.waitlist_id)

        except BackendError as e:
            if compensations:
                await self._compensate(compensations, e)
            return failure("complete_family_onboarding", e, waitlist_id=str(waitlist_id))

        metrics_collector.record_onboarding("completed")
        logger.info(
            "Family onboarding completed",
            extra={
                "waitlist_id": request.waitlist_id,
                "family_id": family_id,
                "children_count": len(children),
            }
        )

        return Envelope.ok(
            OnboardingResult(family_id=family_id, family=family, children=children),
            status_code=201,
        )

    async def _compensate(
        self, compensations: list[tuple[str, list[Filter]]], error: BackendError
    ) -> None:
        """Undo completed steps, newest first, recording any that fail."""
        failed = False
        for table, filters in reversed(compensations):
            try:
                removed = await self.backend.delete(table, filters)
                logger.info(
                    "Compensating delete applied",
                    extra={"table": table, "rows_removed": len(removed)}
                )
            except BackendError as undo_error:
                failed = True
                logger.error(
                    "Compensating delete failed",
                    extra={
                        "table": table,
                        "code": undo_error.code,
                        "error": undo_error.message,
                    }
                )

        if failed:
            error.with_context(compensation_failed=True)
            metrics_collector.record_onboarding("compensation_failed")
        else:
            error.with_context(rolled_back=True)
            metrics_collector.record_onboarding("rolled_back")
