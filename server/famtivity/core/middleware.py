"""Request context middleware: request IDs, access logging and request metrics."""

import logging
import time
import uuid
from typing import Callable, Iterable

import structlog
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .observability import metrics_collector

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = frozenset({"/health", "/metrics", "/favicon.ico"})


def route_label(request: Request) -> str:
    """Label a request by its route template so path parameters don't explode metric cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Give every request an ID and account for it once it completes.

    The ID comes from the ``X-Request-ID`` header when the caller sends one.
    It is stored on ``request.state``, bound into the structlog context while
    the request runs, and echoed on the response. Requests outside
    ``quiet_paths`` are timed, counted and logged at a level matching their
    status.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        quiet_paths: Iterable[str] = QUIET_PATHS,
    ):
        super().__init__(app)
        self.log_requests = log_requests
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        elapsed = time.perf_counter() - started

        response.headers[REQUEST_ID_HEADER] = request_id
        if self.log_requests and request.url.path not in self.quiet_paths:
            self._account(request, response.status_code, elapsed, request_id)
        return response

    @staticmethod
    def _account(request: Request, status_code: int, elapsed: float, request_id: str) -> None:
        endpoint = route_label(request)
        metrics_collector.record_request(request.method, endpoint, status_code, elapsed)

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip(request),
            "status_code": status_code,
            "duration_ms": round(elapsed * 1000, 2),
        }
        if status_code >= 500:
            logger.error("Request failed", extra=context)
        elif status_code >= 400:
            logger.warning("Request rejected", extra=context)
        else:
            logger.info("Request completed", extra=context)


def setup_middleware(app: FastAPI, log_requests: bool = True) -> None:
    """Install the request context middleware on ``app``."""
    app.add_middleware(RequestContextMiddleware, log_requests=log_requests)
