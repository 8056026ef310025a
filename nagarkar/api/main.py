"""FastAPI application initialization and configuration module.

This module is the entry point of the Nagarkar API. It handles:
- Application lifecycle management (startup/shutdown)
- Middleware registration in the correct order
- Exception handler registration
- Mounting the municipal routes under ``/api``
- Health check and monitoring endpoints
- OpenTelemetry instrumentation

Middleware execute in reverse order of registration, so the last one added
is the first to see a request.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from loguru import logger
from sqlalchemy.pool import QueuePool

from nagarkar.api.constants import API_PREFIX
from nagarkar.api.middleware.error_handler import register_exception_handlers
from nagarkar.api.middleware.request_context import RequestContextMiddleware
from nagarkar.api.middleware.request_logging import RequestLoggingMiddleware
from nagarkar.api.middleware.security_headers import SecurityHeadersMiddleware
from nagarkar.api.routers import api_router
from nagarkar.api.utils.responses import ORJSONResponse
from nagarkar.core.config import Settings, get_settings
from nagarkar.core.logging import setup_logging
from nagarkar.core.observability import instrument_app, setup_tracing
from nagarkar.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_tables,
    get_engine,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    is_healthy, error_msg = await check_database_connection()

    if is_healthy:
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    if get_settings().database_config.create_tables:
        await create_tables()

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Municipal property tax management API",
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # Exception handlers BEFORE middleware
    register_exception_handlers(application)

    # 3. Request logging middleware (logs requests/responses)
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)

    # 2. Request context middleware (creates correlation ID)
    application.add_middleware(RequestContextMiddleware)

    # 1. Security headers middleware (adds security headers to all responses)
    application.add_middleware(
        SecurityHeadersMiddleware,
        hsts_enabled=settings.environment == "production",
    )

    application.include_router(api_router, prefix=API_PREFIX)

    @application.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning a welcome message."""
        return {"message": f"{settings.app_name} municipal tax service"}

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint for container probes and load balancers.

        Reports ``degraded`` rather than failing when the database is down.
        """
        health_status: dict[str, object] = {"status": "healthy", "database": False}

        is_healthy, error_msg = await check_database_connection()
        health_status["database"] = is_healthy

        if is_healthy:
            pool = get_engine().pool
            if isinstance(pool, QueuePool):
                logger.bind(
                    metric_type="db.pool.health",
                    checked_out=pool.checkedout(),
                    size=pool.size(),
                    overflow=pool.overflow(),
                ).info("Database pool health check")
        else:
            logger.warning("Database health check failed: {}", error_msg)
            health_status["status"] = "degraded"

        return health_status

    @application.get("/info")
    async def info(
        app_settings: Annotated[Settings, Depends(get_settings)],
    ) -> dict[str, Any]:
        """Get application information.

        Returns:
            dict[str, Any]: Name, version and environment of the service.
        """
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
        }

    instrument_app(application, settings)

    return application


app = create_app()
