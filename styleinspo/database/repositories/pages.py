# styleinspo/database/repositories/pages.py
"""Repository for editable page copy."""

from typing import Sequence

from sqlalchemy import select

from styleinspo.models.database.page import Page
from .base import BaseRepository


class PageRepository(BaseRepository[Page]):
    model = Page

    async def list_all(self) -> Sequence[Page]:
        result = await self.session.execute(select(Page).order_by(Page.id))
        return result.scalars().all()
