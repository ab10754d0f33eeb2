"""Unit tests for AuthService."""

from urllib.parse import parse_qs, urlsplit

import pytest

from famtivity.core.config import Settings
from famtivity.core.exceptions import BackendUnavailableError
from famtivity.services.auth_service import AuthService


def _settings(**overrides):
    values = {
        "supabase_url": "https://project.example.co/",
        "supabase_anon_key": "anon-key",
        "environment": "development",
    }
    values.update(overrides)
    return Settings(**values)


class TestSignInWithGoogle:
    """Tests for the Google OAuth sign-in helper."""

    @pytest.mark.asyncio
    async def test_local_redirect_outside_production(self):
        """Test development sign-in returns to the local dashboard."""
        redirect = await AuthService(_settings()).sign_in_with_google()

        parts = urlsplit(redirect.url)
        query = parse_qs(parts.query)
        assert redirect.provider == "google"
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "https://project.example.co/auth/v1/authorize"
        )
        assert query["provider"] == ["google"]
        assert query["redirect_to"] == ["http://localhost:3000/dashboard"]
        assert query["scopes"] == ["email profile"]

    @pytest.mark.asyncio
    async def test_production_redirect(self):
        """Test production sign-in returns to the public dashboard."""
        redirect = await AuthService(_settings(environment="production")).sign_in_with_google()

        query = parse_qs(urlsplit(redirect.url).query)
        assert query["redirect_to"] == ["https://famtivity.com/dashboard"]

    @pytest.mark.asyncio
    async def test_missing_endpoint_raises(self):
        """Test sign-in raises instead of returning an envelope when unconfigured."""
        with pytest.raises(BackendUnavailableError) as exc_info:
            await AuthService(_settings(supabase_url=None)).sign_in_with_google()

        assert exc_info.value.code == "BACKEND_UNAVAILABLE"
        assert exc_info.value.status_code == 503
