"""Site settings endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from styleinspo.api.dependencies import get_site_settings_service
from styleinspo.core.security import get_current_admin
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.models.domain.theme import SiteSettingsUpdate
from styleinspo.services.site_settings import SiteSettingsService

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def get_public_settings(
    site_settings: SiteSettingsService = Depends(get_site_settings_service)
):
    """Footer and social settings; ``socialLinks`` lists only configured networks."""
    return (await site_settings.get_public()).to_response()


@router.get("/admin", response_model=Dict[str, Any])
async def get_admin_settings(
    admin: AdminIdentity = Depends(get_current_admin),
    site_settings: SiteSettingsService = Depends(get_site_settings_service)
):
    return (await site_settings.get()).to_response()


@router.put("", response_model=Dict[str, Any])
async def update_settings(
    changes: SiteSettingsUpdate,
    admin: AdminIdentity = Depends(get_current_admin),
    site_settings: SiteSettingsService = Depends(get_site_settings_service)
):
    return (await site_settings.update(changes)).to_response()
