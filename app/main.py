"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import time
import uuid
from contextlib import asynccontextmanager

from app.config import get_settings
from app.core.logging import configure_logging
from app.core.error_handlers import setup_error_handlers, error_handler
from app.models import HealthCheckResponse

# Get application settings
settings = get_settings()

configure_logging(
    level=settings.log_level.value,
    fmt=settings.log_format,
    log_file=settings.log_file,
)

logger = logging.getLogger(__name__)

_started_at = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    Handles startup and shutdown events with proper service lifecycle.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    from app.core.dependencies import service_container

    # Tests may install an already initialized container before startup
    container = getattr(app.state, 'service_container', None) or service_container
    await container.initialize_services(settings)
    app.state.service_container = container

    logger.info("Application startup complete")

    try:
        yield
    finally:
        # Shutdown
        logger.info("Shutting down application")
        await container.cleanup_services()
        logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Add CORS middleware with configuration
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    # Set up error handlers
    setup_error_handlers(app)

    # Add request logging middleware
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log requests and responses with timing information."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request {request_id} started: {request.method} {request.url.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.url.path,
                'client_ip': request.client.host if request.client else 'unknown'
            }
        )

        response = await call_next(request)

        processing_time = (time.time() - start_time) * 1000

        logger.info(
            f"Request {request_id} completed: {response.status_code} ({processing_time:.2f}ms)",
            extra={
                'request_id': request_id,
                'status_code': response.status_code,
                'processing_time_ms': processing_time
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response

    # Include API routers
    from app.api import modifier_router
    app.include_router(modifier_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check(request: Request) -> HealthCheckResponse:
        """Health check endpoint reporting OCR collaborator status."""
        container = getattr(request.app.state, 'service_container', None)

        ocr_backend = "unavailable"
        ocr_healthy = False
        if container is not None and container.initialized:
            ocr_service = container.get_ocr_service()
            ocr_backend = ocr_service.backend_name
            ocr_healthy = await ocr_service.health_check()

        if container is None or not container.initialized:
            status = "unhealthy"
        elif ocr_healthy:
            status = "healthy"
        else:
            status = "degraded"

        return HealthCheckResponse(
            status=status,
            version=settings.app_version,
            ocr_backend=ocr_backend,
            ocr_healthy=ocr_healthy,
            uptime_seconds=int(time.time() - _started_at),
            error_statistics=error_handler.get_error_statistics(),
        )

    return app


# Create application instance
app = create_app()
