"""Theme endpoints. Reads are public; saving and resetting need the admin."""

from typing import Dict

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from styleinspo.api.dependencies import get_theme_service
from styleinspo.core.security import get_current_admin
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.models.domain.theme import ThemeSettings, ThemeUpdate
from styleinspo.services.theme import ThemeService, css_variables, render_css

router = APIRouter()


@router.get("/theme", response_model=ThemeSettings)
async def get_theme(themes: ThemeService = Depends(get_theme_service)):
    """The active theme, created from defaults when none exists."""
    return await themes.get_active()


@router.post("/theme", response_model=ThemeSettings)
async def save_theme(
    update: ThemeUpdate,
    admin: AdminIdentity = Depends(get_current_admin),
    themes: ThemeService = Depends(get_theme_service)
):
    """Merge the given sections over the active theme."""
    return await themes.save(update)


@router.put("/theme", response_model=ThemeSettings)
async def reset_theme(
    admin: AdminIdentity = Depends(get_current_admin),
    themes: ThemeService = Depends(get_theme_service)
):
    return await themes.reset_to_default()


@router.get("/theme/variables", response_model=Dict[str, str])
async def get_theme_variables(themes: ThemeService = Depends(get_theme_service)):
    return css_variables(await themes.get_active())


@router.get("/theme.css", response_class=PlainTextResponse)
async def get_theme_css(themes: ThemeService = Depends(get_theme_service)):
    return PlainTextResponse(render_css(await themes.get_active()), media_type="text/css")
