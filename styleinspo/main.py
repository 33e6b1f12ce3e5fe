"""Main FastAPI application entry point.

This module serves as the primary entry point for the StyleInspo API.
It handles all core application setup including:
- FastAPI application initialization and configuration
- Middleware setup for CORS, correlation ids and request logging
- Database connection management and schema initialization
- Service wiring on ``app.state``
- Route registration and API versioning
- Exception handlers producing one error shape
- Health check endpoint
"""

# Standard library imports
import time
from contextlib import asynccontextmanager
from typing import Optional

# FastAPI imports
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Internal imports
from styleinspo.api.v1.router import api_router
from styleinspo.core.config import Settings, get_settings
from styleinspo.core.exceptions import AppException
from styleinspo.core.logging import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    get_logger,
    setup_logging
)
from styleinspo.database.session import SessionManager, init_db
from styleinspo.models.domain.common import ErrorResponse

# Service imports
from styleinspo.services.analytics import AnalyticsService
from styleinspo.services.email import EmailService
from styleinspo.services.looks import LookService
from styleinspo.services.media import MediaGateway
from styleinspo.services.seo import SEOContentGenerator
from styleinspo.services.site_settings import SiteSettingsService
from styleinspo.services.theme import ThemeService
from styleinspo.services.vision import VisionAnalyzer

logger = get_logger(__name__)


def _error_body(message: str) -> dict:
    return ErrorResponse(error=message).model_dump()


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle custom application exceptions"""
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail),
            headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Missing or malformed input is a 400 with a readable message"""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(_validation_message(exc))
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=exc,
            method=request.method,
            path=request.url.path
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error")
        )


def create_application(
    settings: Optional[Settings] = None,
    *,
    media: Optional[MediaGateway] = None,
    analyzer: Optional[VisionAnalyzer] = None,
    email_service: Optional[EmailService] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    The integrations can be passed in to replace the ones built from settings.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Handle application startup and shutdown events.
        This context manager ensures proper resource management.
        """
        setup_logging()
        logger.info("Starting up application...", environment=settings.ENVIRONMENT.value)

        session_manager = SessionManager(settings.DB)
        app.state.session_manager = session_manager
        try:
            await init_db(session_manager)

            app.state.media = media or MediaGateway(settings.STORAGE)
            app.state.analyzer = analyzer or VisionAnalyzer.from_settings(settings.VISION)
            app.state.email_service = email_service or EmailService(settings.EMAIL)
            app.state.seo_generator = SEOContentGenerator(
                app.state.analyzer,
                brand_name=settings.BRAND_NAME
            )
            app.state.look_service = LookService(
                session_manager,
                app.state.media,
                app.state.seo_generator
            )
            app.state.theme_service = ThemeService(session_manager)
            app.state.site_settings_service = SiteSettingsService(session_manager)
            app.state.analytics_service = AnalyticsService(session_manager)

            if not app.state.media.configured:
                logger.warning("Image storage not configured; uploads are disabled")
            if not app.state.analyzer.configured_providers:
                logger.warning("No vision provider configured; SEO runs without vision")
            if not app.state.email_service.configured:
                logger.warning("Email provider not configured; contact form is disabled")
            logger.info("Services initialized successfully")

            yield  # Application runs here

        except Exception as e:
            logger.error("Startup failed", error=e)
            raise

        finally:
            logger.info("Shutting down application...")
            await session_manager.dispose()
            logger.info("Cleanup completed")

    # Initialize FastAPI with custom configurations
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Fashion look gallery, SEO generation and site theming",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.PROD else None,
        redoc_url="/api/redoc" if not settings.PROD else None,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware; the correlation id is set before request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register routers
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        """
        Health check endpoint for monitoring systems.
        Reports database connectivity and which integrations are configured.
        """
        state = request.app.state
        database_ok = await state.session_manager.healthcheck()
        body = {
            "status": "healthy" if database_ok else "unhealthy",
            "timestamp": time.time(),
            "version": request.app.version,
            "services": {
                "database": "connected" if database_ok else "unavailable",
                "storage": "configured" if state.media.configured else "not_configured",
                "vision": state.analyzer.configured_providers,
                "email": "configured" if state.email_service.configured else "not_configured"
            }
        }
        if not database_ok:
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
        return body

    return app


# Create the application instance
app = create_application()

# Only run the server directly in development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "styleinspo.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.PROD,
        log_level="debug" if not settings.PROD else "info"
    )
