"""Router configuration for the StyleInspo application.

This module organizes and configures all API routes, combining endpoints from
different modules into a unified API structure.
"""

from fastapi import APIRouter

# Import endpoint routers
from styleinspo.api.v1.endpoints import (
    analytics,
    auth,
    contact,
    looks,
    pages,
    seo,
    site_settings,
    theme,
    upload
)

# Create main router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(looks.router, prefix="/looks", tags=["looks"])
api_router.include_router(seo.router, prefix="/seo", tags=["seo"])
api_router.include_router(theme.router, tags=["theme"])
api_router.include_router(site_settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(pages.router, prefix="/pages", tags=["pages"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(contact.router, prefix="/contact", tags=["contact"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
