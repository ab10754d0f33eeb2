"""Auth-related Pydantic schemas."""

from pydantic import BaseModel, Field


class OAuthRedirect(BaseModel):
    """Where to send the browser to start a third-party sign-in."""

    provider: str = Field(..., description="OAuth provider identifier")
    url: str = Field(..., description="Authorize URL including callback and scopes")
