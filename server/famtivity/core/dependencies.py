"""Backend construction and FastAPI dependencies."""

import logging

from fastapi import Depends, Request

from ..backend import DataBackend, RestBackend, SqlBackend
from .config import Settings, settings
from .database import create_engine

logger = logging.getLogger(__name__)


def create_backend(config: Settings) -> DataBackend:
    """
    Build the process-wide data backend from configuration.

    A configured ``DATABASE_URL`` selects the direct SQL backend; otherwise
    the hosted backend is used with the endpoint URL and public API key.
    """
    if config.database_url:
        logger.info("Using direct SQL backend")
        return SqlBackend(create_engine(config.database_url, echo=False))

    if not config.supabase_url or not config.supabase_anon_key:
        logger.warning(
            "Hosted backend credentials are incomplete; calls will fail until configured",
            extra={
                "has_url": bool(config.supabase_url),
                "has_key": bool(config.supabase_anon_key),
            }
        )
    return RestBackend(
        url=config.supabase_url,
        api_key=config.supabase_anon_key,
        timeout=config.request_timeout_seconds,
    )


def get_settings() -> Settings:
    """Settings dependency; overridden in tests."""
    return settings


def get_backend(request: Request) -> DataBackend:
    """
    Backend dependency resolving the handle created at application startup.

    Returns:
        DataBackend: Backend stored on ``app.state`` by the lifespan handler
    """
    return request.app.state.backend


BackendDependency = Depends(get_backend)
SettingsDependency = Depends(get_settings)
