"""Auth service for third-party sign-in."""

import logging

import httpx

from ..core.config import Settings
from ..core.exceptions import BackendUnavailableError
from ..schemas.auth import OAuthRedirect

logger = logging.getLogger(__name__)

GOOGLE_PROVIDER = "google"


class AuthService:
    """Service for sign-in flows handled by the hosted backend's auth API."""

    def __init__(self, config: Settings):
        self.config = config

    async def sign_in_with_google(self) -> OAuthRedirect:
        """
        Start a Google OAuth sign-in.

        Unlike the data operations this raises instead of returning an
        envelope.

        Returns:
            Provider and the authorize URL to redirect the browser to

        Raises:
            BackendUnavailableError: If the backend endpoint is not configured
        """
        if not self.config.supabase_url:
            raise BackendUnavailableError(
                detail="Backend endpoint URL must be configured to sign in"
            )

        url = httpx.URL(
            f"{self.config.supabase_url.rstrip('/')}/auth/v1/authorize",
            params={
                "provider": GOOGLE_PROVIDER,
                "redirect_to": self.config.oauth_redirect_url,
                "scopes": self.config.oauth_scopes,
            },
        )

        logger.info(
            "Google sign-in started",
            extra={"redirect_to": self.config.oauth_redirect_url}
        )

        return OAuthRedirect(provider=GOOGLE_PROVIDER, url=str(url))
