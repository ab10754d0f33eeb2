"""Envelope rendering shared by the routers."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import ValidationError
from ..schemas.common import Envelope


def envelope_response(envelope: Envelope) -> JSONResponse:
    """Render an envelope as ``{success, data}`` or ``{success, error, ...}``."""
    body = envelope.model_dump(mode="json")
    if envelope.success:
        content = {"success": True, "data": body["data"]}
    else:
        content = {
            key: body[key]
            for key in ("success", "error", "code", "details")
            if body[key] is not None
        }
    return JSONResponse(status_code=envelope.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body validation failures as failure envelopes."""
    violations = [
        {
            "path": ".".join(str(part) for part in error["loc"] if part != "body") or "body",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return envelope_response(
        Envelope.failure(
            ValidationError(detail="Request body failed validation", violations=violations)
        )
    )
