"""FastAPI application initialization and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .backend import DataBackend, SqlBackend
from .core.config import settings
from .core.dependencies import create_backend
from .core.exceptions import (
    ProblemDetailsException,
    generic_exception_handler,
    problem_details_handler,
)
from .core.middleware import setup_middleware
from .core.observability import (
    SERVICE_NAME,
    SERVICE_VERSION,
    get_prometheus_metrics,
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_metrics,
    setup_structured_logging,
    setup_tracing,
)
from .routers import (
    activity_router,
    auth_router,
    booking_router,
    family_router,
    feedback_router,
    waitlist_router,
)
from .routers.responses import request_validation_handler

# Configure structured logging
setup_structured_logging()

# Configure traditional logging for compatibility
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def create_app(backend: DataBackend | None = None, instrument: bool = True) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        backend: Data backend to serve from; built from settings at startup
            when omitted
        instrument: Whether to set up OpenTelemetry tracing and metrics

    Returns:
        FastAPI: Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Create the process-wide backend on startup and release it on shutdown."""
        logger.info("Starting Famtivity API")
        logger.info(f"Environment: {settings.environment}")

        owns_backend = backend is None
        app.state.backend = backend if backend is not None else create_backend(settings)

        if instrument:
            setup_tracing(SERVICE_NAME)
            setup_metrics(SERVICE_NAME)
            if isinstance(app.state.backend, SqlBackend):
                instrument_sqlalchemy(app.state.backend.engine)
            logger.info("Observability setup completed")

        logger.info("Application startup complete")

        yield

        logger.info("Shutting down Famtivity API")
        if owns_backend:
            try:
                await app.state.backend.aclose()
                logger.info("Backend connections closed")
            except Exception as e:
                logger.error(f"Error during backend cleanup: {e}")

        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Famtivity API",
        description="RPC-over-HTTP API for family activity waitlist signup, onboarding, dashboards, search, booking and feedback",
        version=SERVICE_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    if backend is not None:
        app.state.backend = backend

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    setup_middleware(app, log_requests=True)

    if instrument:
        instrument_fastapi(app)

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Health Check",
        description="Check if the service is healthy and responsive",
        response_model=dict,
    )
    async def health_check():
        """
        Health check endpoint that returns service status.

        Returns:
            dict: Health status information
        """
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": settings.environment,
            "backend": type(getattr(app.state, "backend", None)).__name__,
        }

    @app.get(
        "/metrics",
        summary="Prometheus Metrics",
        description="Endpoint for Prometheus to scrape metrics",
        response_class=Response,
        tags=["Observability"],
    )
    async def prometheus_metrics():
        """Return Prometheus metrics in text format."""
        return Response(
            content=get_prometheus_metrics(),
            media_type="text/plain; version=0.0.4; charset=utf-8"
        )

    app.include_router(auth_router)
    app.include_router(waitlist_router)
    app.include_router(family_router)
    app.include_router(activity_router)
    app.include_router(booking_router)
    app.include_router(feedback_router)

    logger.info("FastAPI application created and configured")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "famtivity.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
