# styleinspo/database/repositories/themes.py
"""Repositories for the theme rows and the site settings singleton."""

from typing import Optional

from sqlalchemy import select, update

from styleinspo.models.database.theme import Theme, SiteSettingsRecord, SITE_SETTINGS_ID
from .base import BaseRepository


class ThemeRepository(BaseRepository[Theme]):
    """Repository for managing themes."""

    model = Theme

    async def get_active(self) -> Optional[Theme]:
        """Get the active theme, if any."""
        query = (
            select(Theme)
            .where(Theme.is_active.is_(True))
            .order_by(Theme.updated_at.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalars().first()

    async def deactivate_all(self) -> int:
        """Clear the active flag on every theme."""
        result = await self.session.execute(
            update(Theme)
            .where(Theme.is_active.is_(True))
            .values(is_active=False)
        )
        return result.rowcount

    async def upsert_active(self, id: str, **fields) -> Theme:
        """Insert or update a theme and mark it active.

        Call inside the same transaction as ``deactivate_all``.
        """
        theme = await self.get(id)
        if theme is None:
            theme = await self.create(id=id, is_active=True, **fields)
        else:
            for field, value in fields.items():
                setattr(theme, field, value)
            theme.is_active = True
            await self.session.flush()
        # The bulk deactivate may have expired loaded attributes
        await self.session.refresh(theme)
        return theme


class SiteSettingsRepository(BaseRepository[SiteSettingsRecord]):
    """Repository for the singleton site settings row."""

    model = SiteSettingsRecord

    async def get_or_create(self) -> SiteSettingsRecord:
        record = await self.get(SITE_SETTINGS_ID)
        if record is None:
            record = await self.create(id=SITE_SETTINGS_ID)
        return record
