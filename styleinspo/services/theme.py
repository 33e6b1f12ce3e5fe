"""Theme service.

Exactly one theme row is active at a time. Saving merges the partial update
over the active theme section by section, then deactivates every theme and
upserts the merged one as active in the same transaction.

``css_variables`` is the single projection of a theme into the flat
``--theme-*`` namespace the site styles read from.
"""

from typing import Any, Dict, Type
from uuid import uuid4

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from styleinspo.core.exceptions import PersistenceError, ValidationError
from styleinspo.core.logging import get_logger
from styleinspo.database.repositories.themes import ThemeRepository
from styleinspo.database.session import SessionManager, with_tracing
from styleinspo.models.database.theme import Theme
from styleinspo.models.domain.theme import (
    ColorSettings,
    LayoutSettings,
    LogoSettings,
    ThemeSettings,
    ThemeUpdate,
    TypographySettings
)

logger = get_logger(__name__)

DEFAULT_THEME_NAME = "Default Theme"

SECTIONS: Dict[str, Type[BaseModel]] = {
    "logo": LogoSettings,
    "colors": ColorSettings,
    "typography": TypographySettings,
    "layout": LayoutSettings,
}

HEADING_SIZES = {"small": "1.875rem", "medium": "2.25rem", "large": "3rem", "xl": "3.75rem"}
BODY_SIZES = {"small": "0.875rem", "medium": "1rem", "large": "1.125rem"}
CONTAINER_WIDTHS = {"narrow": "768px", "normal": "1024px", "wide": "1280px", "full": "100%"}
BORDER_RADII = {"none": "0px", "small": "0.25rem", "medium": "0.5rem", "large": "1rem"}
FONT_WEIGHTS = {"light": "300", "normal": "400", "medium": "500", "bold": "700"}
SPACINGS = {"tight": "0.75rem", "normal": "1rem", "relaxed": "1.5rem"}

COLOR_VARIABLES = (
    ("primary", "--theme-primary"),
    ("secondary", "--theme-secondary"),
    ("accent", "--theme-accent"),
    ("background", "--theme-background"),
    ("background_secondary", "--theme-background-secondary"),
    ("text", "--theme-text"),
    ("text_muted", "--theme-text-muted"),
    ("button", "--theme-button"),
    ("button_hover", "--theme-button-hover"),
    ("tag_background", "--theme-tag-background"),
    ("tag_text", "--theme-tag-text"),
    ("card_background", "--theme-card-background"),
    ("card_overlay", "--theme-card-overlay"),
    ("header_background", "--theme-header-background"),
    ("header_border", "--theme-header-border"),
)


def css_variables(theme: ThemeSettings) -> Dict[str, str]:
    """Flatten a theme into CSS custom properties."""
    variables = {
        name: getattr(theme.colors, field) for field, name in COLOR_VARIABLES
    }
    typography = theme.typography
    layout = theme.layout
    variables.update({
        "--theme-font-family": typography.font_family,
        "--theme-heading-size": HEADING_SIZES[typography.heading_size],
        "--theme-body-size": BODY_SIZES[typography.body_size],
        "--theme-font-weight": FONT_WEIGHTS[typography.font_weight],
        "--theme-container-width": CONTAINER_WIDTHS[layout.container_width],
        "--theme-spacing": SPACINGS[layout.spacing],
        "--theme-border-radius": BORDER_RADII[layout.border_radius],
        "--theme-logo-width": f"{theme.logo.width}px",
        "--theme-logo-height": f"{theme.logo.height}px",
    })
    return variables


def render_css(theme: ThemeSettings) -> str:
    lines = [f"  {name}: {value};" for name, value in css_variables(theme).items()]
    return ":root {\n" + "\n".join(lines) + "\n}\n"


def default_sections() -> Dict[str, Dict[str, Any]]:
    return {name: model().model_dump(mode="json", by_alias=True) for name, model in SECTIONS.items()}


def _wire_keys(model: Type[BaseModel], values: Dict[str, Any]) -> Dict[str, Any]:
    """Accept snake_case or camelCase keys; return camelCase."""
    normalized = {}
    for key, value in values.items():
        field = model.model_fields.get(key)
        normalized[field.alias if field and field.alias else key] = value
    return normalized


def _validation_message(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid theme value for {location}: {first.get('msg')}" if location else first.get("msg")


def to_settings(theme: Theme) -> ThemeSettings:
    return ThemeSettings.model_validate(theme)


class ThemeService:
    """Service for the active site theme."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def _create_default(self, repo: ThemeRepository) -> Theme:
        await repo.deactivate_all()
        theme = await repo.upsert_active(
            uuid4().hex,
            name=DEFAULT_THEME_NAME,
            **default_sections()
        )
        logger.info("Default theme created", theme_id=theme.id)
        return theme

    @with_tracing
    async def get_active(self) -> ThemeSettings:
        """The active theme, creating the default when none is active."""
        try:
            async with self.session_manager.transaction() as session:
                repo = ThemeRepository(session)
                theme = await repo.get_active()
                if theme is None:
                    theme = await self._create_default(repo)
                return to_settings(theme)
        except SQLAlchemyError as e:
            logger.error("Failed to load theme", error=e)
            raise PersistenceError("Failed to load theme") from e

    def merge(self, current: ThemeSettings, update: ThemeUpdate) -> Dict[str, Any]:
        """Column values for ``current`` with ``update`` laid over each section."""
        merged: Dict[str, Any] = {"name": update.name or current.name}
        for section, model in SECTIONS.items():
            stored = getattr(current, section).model_dump(mode="json", by_alias=True)
            changes = getattr(update, section) or {}
            try:
                validated = model.model_validate({**stored, **_wire_keys(model, changes)})
            except PydanticValidationError as e:
                raise ValidationError(_validation_message(e))
            merged[section] = validated.model_dump(mode="json", by_alias=True)
        return merged

    @with_tracing
    async def save(self, update: ThemeUpdate) -> ThemeSettings:
        """Merge ``update`` over the active theme and persist it as the active one."""
        try:
            async with self.session_manager.transaction() as session:
                repo = ThemeRepository(session)
                current = await repo.get_active()
                if current is None:
                    current = await self._create_default(repo)
                fields = self.merge(to_settings(current), update)

                await repo.deactivate_all()
                theme = await repo.upsert_active(current.id, **fields)
                result = to_settings(theme)
        except SQLAlchemyError as e:
            logger.error("Failed to save theme", error=e)
            raise PersistenceError("Failed to save theme") from e

        logger.info("Theme saved", theme_id=result.id)
        return result

    @with_tracing
    async def reset_to_default(self) -> ThemeSettings:
        try:
            async with self.session_manager.transaction() as session:
                theme = await self._create_default(ThemeRepository(session))
                return to_settings(theme)
        except SQLAlchemyError as e:
            logger.error("Failed to reset theme", error=e)
            raise PersistenceError("Failed to reset theme") from e
