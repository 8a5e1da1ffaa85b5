"""
Main FastAPI application module.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from agrofinance.api.v1.router import api_router
from agrofinance.core.config import settings
from agrofinance.core.database import close_database
from agrofinance.core.db_init import init_db
from agrofinance.core.exceptions import FinanceError, finance_error_handler
from agrofinance.core.logging import get_logger, log_error, setup_logging
from agrofinance.core.middleware import LoggingMiddleware, RateLimitMiddleware, RequestIDMiddleware
from agrofinance.core.redis import close_redis, init_redis

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    """
    # Startup
    setup_logging()
    await init_db()
    await init_redis()
    logger.info("application_started", environment=settings.environment, version=settings.app_version)

    yield

    # Shutdown
    await close_redis()
    await close_database()
    logger.info("application_stopped")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(logger, exc, method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "type": "internal"},
    )


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Add custom middleware; RequestIDMiddleware must wrap LoggingMiddleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    if settings.rate_limit_enabled:
        app.add_middleware(RateLimitMiddleware)

    app.add_exception_handler(FinanceError, finance_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


# Create the application instance
app = create_application()
