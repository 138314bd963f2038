import time
import uuid
import logging

from typing import Optional, Set
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from bookreview.core.config import settings
from bookreview.core.logging import request_id_var
from bookreview.core.security import SecurityHeaders

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Adds a correlation id to each request and logs structured
    information about the request and its response.
    """

    def __init__(self, app, exclude_paths: Optional[Set[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or {"/health", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()

        should_log = request.url.path not in self.exclude_paths

        try:
            if should_log:
                logger.info(
                    "Incoming request",
                    extra={
                        "client_ip": self._get_client_ip(request),
                        "method": request.method,
                        "path": request.url.path,
                        "query_params": (
                            str(request.query_params) if request.query_params else None
                        ),
                    },
                )

            # Exceptions raised here are rendered by the registered handlers
            response = await call_next(request)

            process_time = (time.perf_counter() - start_time) * 1000
            response.headers["X-Request-ID"] = request_id

            if should_log:
                logger.info(
                    "Request completed",
                    extra={
                        "status_code": response.status_code,
                        "process_time_ms": round(process_time, 2),
                    },
                )
            return response
        finally:
            request_id_var.reset(token)

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP considering proxy headers"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        return request.client.host if request.client else "unknown"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the headers from SecurityHeaders to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        headers = SecurityHeaders.get_headers()
        if request.url.scheme == "https":
            headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        for header, value in headers.items():
            response.headers[header] = value

        return response


def register_middlewares(app: FastAPI):
    """
    Registers all middlewares for the FastAPI application.
    Middlewares run in reverse order of registration.
    """
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)

    cors_origins = settings.cors_origins_list
    if not cors_origins:
        logger.warning("CORS_ORIGINS is empty, cross-origin requests will be rejected")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Registered last so it wraps everything else
    app.add_middleware(
        RequestLoggingMiddleware, exclude_paths=settings.LOGGING_EXCLUDE_PATHS
    )

    logger.info("All middlewares registered successfully")
