"""Auth router for third-party sign-in."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, RedirectResponse

from ..core.config import Settings
from ..core.dependencies import SettingsDependency
from ..schemas.auth import OAuthRedirect
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.get("/google", response_class=RedirectResponse, status_code=307)
async def redirect_to_google(config: Settings = SettingsDependency) -> RedirectResponse:
    """
    Redirect the browser to Google sign-in.

    Failures are reported as problem details rather than envelopes.
    """
    redirect = await AuthService(config).sign_in_with_google()
    return RedirectResponse(url=redirect.url, status_code=307)


@router.post("/google", response_model=OAuthRedirect)
async def start_google_sign_in(config: Settings = SettingsDependency) -> JSONResponse:
    """Return the Google sign-in URL for clients that redirect themselves."""
    redirect = await AuthService(config).sign_in_with_google()
    return JSONResponse(status_code=200, content=redirect.model_dump())
