"""
Backend error taxonomy.

Every failure a data backend reports is a ``BackendError``; the subclasses
form the closed set of kinds callers branch on. The errors double as HTTP
exceptions whose body is an RFC 9457 problem details object.

https://tools.ietf.org/rfc/rfc9457.txt
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

PROBLEM_TYPE_BASE = "https://famtivity.com/problems"


class ProblemDetailsException(HTTPException):
    """HTTP exception rendered as a problem details document."""

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.title = title
        self.type_uri = type_uri or f"about:blank#{status_code}"
        self.extensions: Dict[str, Any] = dict(extensions or {})

    @property
    def problem_details(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": self.type_uri,
            "title": self.title,
            "status": self.status_code,
        }
        if self.detail:
            body["detail"] = self.detail
        body.update(self.extensions)
        return body


class BackendError(ProblemDetailsException):
    """A backend operation failed in a way none of the subclasses describe."""

    code = "BACKEND_ERROR"
    status = 502
    title = "Backend Operation Failed"
    slug = "backend-error"

    def __init__(
        self,
        detail: str = "The backend operation failed",
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=self.status,
            title=type(self).title,
            detail=detail,
            type_uri=f"{PROBLEM_TYPE_BASE}/{self.slug}",
            extensions={**(extensions or {}), "code": self.code},
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail

    def with_context(self, **context: Any) -> "BackendError":
        """Attach structured context after the error was raised."""
        self.extensions.update(context)
        return self


class ValidationError(BackendError):
    """Input was rejected, locally or by the backend."""

    code = "VALIDATION_ERROR"
    status = 400
    title = "Validation Error"
    slug = "validation-error"

    def __init__(
        self,
        detail: str = "The request data failed validation",
        violations: Optional[List[Dict[str, str]]] = None,
        extensions: Optional[Dict[str, Any]] = None,
    ):
        extensions = dict(extensions or {})
        if violations:
            extensions["violations"] = violations
        super().__init__(detail=detail, extensions=extensions)


class NotFoundError(BackendError):
    """A row the operation depends on does not exist."""

    code = "NOT_FOUND"
    status = 404
    title = "Resource Not Found"
    slug = "resource-not-found"

    def __init__(
        self,
        resource_type: str = "resource",
        resource_id: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        extensions: Dict[str, Any] = {"resource_type": resource_type}
        if resource_id:
            extensions["resource_id"] = resource_id
            detail = detail or f"The requested {resource_type} with ID '{resource_id}' could not be found"
        super().__init__(
            detail=detail or f"The requested {resource_type} could not be found",
            extensions=extensions,
        )


class ConflictError(BackendError):
    """The write collides with existing data, e.g. a unique constraint."""

    code = "CONFLICT"
    status = 409
    title = "Resource Conflict"
    slug = "resource-conflict"

    def __init__(
        self,
        detail: str = "The request conflicts with the current state of the resource",
        conflicting_resource: Optional[Dict[str, Any]] = None,
    ):
        extensions = {"conflicting_resource": conflicting_resource} if conflicting_resource else {}
        super().__init__(detail=detail, extensions=extensions)


class BackendUnavailableError(BackendError):
    """The backend is unreachable, timed out, or is not configured."""

    code = "BACKEND_UNAVAILABLE"
    status = 503
    title = "Backend Unavailable"
    slug = "backend-unavailable"

    def __init__(
        self,
        detail: str = "The data backend is unavailable",
        retry_after: Optional[int] = None,
        extensions: Optional[Dict[str, Any]] = None,
    ):
        extensions = dict(extensions or {})
        headers = None
        if retry_after:
            extensions["retry_after_seconds"] = retry_after
            headers = {"Retry-After": str(retry_after)}
        super().__init__(detail=detail, extensions=extensions, headers=headers)


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """Render a raised problem details exception."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.problem_details,
        headers=exc.headers,
        media_type="application/problem+json",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an unhandled exception as a 500 problem without leaking its message."""
    error_id = str(uuid.uuid4())
    logger.exception(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content={
            "type": f"{PROBLEM_TYPE_BASE}/internal-server-error",
            "title": "Internal Server Error",
            "status": 500,
            "detail": "An unexpected error occurred while processing the request",
            "instance": str(request.url),
            "error_id": error_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        media_type="application/problem+json",
    )
