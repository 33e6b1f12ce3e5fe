"""Dependencies for FastAPI application.

This module defines dependencies used across API endpoints including:
- Service instances (created once per application in the lifespan)
- Request context for analytics
"""

from fastapi import Request

from styleinspo.models.domain.analytics import RequestContext
from styleinspo.services.analytics import AnalyticsService, request_context
from styleinspo.services.email import EmailService
from styleinspo.services.looks import LookService
from styleinspo.services.media import MediaGateway
from styleinspo.services.seo import SEOContentGenerator
from styleinspo.services.site_settings import SiteSettingsService
from styleinspo.services.theme import ThemeService


# Service Dependencies
def get_look_service(request: Request) -> LookService:
    return request.app.state.look_service


def get_seo_generator(request: Request) -> SEOContentGenerator:
    return request.app.state.seo_generator


def get_media_gateway(request: Request) -> MediaGateway:
    return request.app.state.media


def get_theme_service(request: Request) -> ThemeService:
    return request.app.state.theme_service


def get_site_settings_service(request: Request) -> SiteSettingsService:
    return request.app.state.site_settings_service


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_request_context(request: Request) -> RequestContext:
    return request_context(request.headers)
