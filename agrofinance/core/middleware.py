"""
Custom middleware for the application.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from agrofinance.core.config import settings
from agrofinance.core.logging import LogContext, get_logger, log_request
from agrofinance.core.redis import get_redis_client

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to add a unique request ID to each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add request ID to request state and response headers."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        with LogContext(request_id=request_id):
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request details and response status."""
        start_time = time.time()
        client_host = request.client.host if request.client else None

        logger.debug(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_host=client_host,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=(time.time() - start_time) * 1000,
                error=str(e),
                exc_info=True,
            )
            raise

        log_request(
            logger,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=(time.time() - start_time) * 1000,
            client_host=client_host,
        )
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to implement fixed-window rate limiting using Redis."""

    def __init__(self, app):
        super().__init__(app)
        self.rate_limit = settings.rate_limit_per_minute

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Check rate limit before processing request."""
        if request.url.path.startswith("/api/v1/health"):
            return await call_next(request)

        client_id = self._get_client_id(request)
        current = await self._hit(client_id)

        if current is not None and current > self.rate_limit:
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Rate limit exceeded. Please try again later.",
                    "type": "rate_limit_exceeded",
                },
                headers={
                    "X-RateLimit-Limit": str(self.rate_limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(int(time.time()) + 60),
                },
            )

        response = await call_next(request)

        remaining = self.rate_limit if current is None else max(0, self.rate_limit - current)
        response.headers["X-RateLimit-Limit"] = str(self.rate_limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response

    def _get_client_id(self, request: Request) -> str:
        """Get client identifier from request."""
        if request.client:
            return f"ip:{request.client.host}"
        return "anonymous"

    async def _hit(self, client_id: str):
        """Count a request for the client; None when Redis is unavailable."""
        redis_client = await get_redis_client()
        if not redis_client:
            return None

        try:
            key = f"rate_limit:{client_id}"
            current = await redis_client.incr(key)
            if current == 1:
                await redis_client.expire(key, 60)
            return current
        except Exception as e:
            logger.error("rate_limit_check_failed", error=str(e))
            return None
