"""Helpers shared by the data-access services."""

import logging
from typing import Any

from ..backend import Row
from ..core.exceptions import BackendError, NotFoundError
from ..core.observability import metrics_collector
from ..schemas.common import Envelope

logger = logging.getLogger(__name__)


def single_row(rows: list[Row], resource_type: str) -> Row:
    """Return the only row a write returned."""
    if not rows:
        raise NotFoundError(
            resource_type=resource_type,
            detail=f"The backend returned no {resource_type} row",
        )
    return rows[0]


def failure(operation: str, error: BackendError, **context: Any) -> Envelope:
    """Log and count a failed operation and wrap it in an envelope."""
    logger.error(
        f"Error in {operation}",
        extra={
            "operation": operation,
            "code": error.code,
            "error": error.message,
            **context,
        }
    )
    metrics_collector.record_failure(operation, error.code)
    return Envelope.failure(error)
