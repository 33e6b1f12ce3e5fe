# styleinspo/database/repositories/looks.py
"""Repository for look-related database operations."""

from typing import Any, Dict, Optional, Sequence, Tuple

from sqlalchemy import select

from styleinspo.models.database.look import FashionLook
from .base import BaseRepository


class LookRepository(BaseRepository[FashionLook]):
    """Repository for managing looks."""

    model = FashionLook

    async def list_newest_first(self) -> Sequence[FashionLook]:
        """Get every look, most recently created first."""
        query = select(FashionLook).order_by(
            FashionLook.created_at.desc(),
            FashionLook.id
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def create_if_absent(self, id: str, **fields) -> Tuple[FashionLook, bool]:
        """Insert a look unless one with the same id exists.

        Returns:
            The stored look and whether it was created by this call
        """
        existing = await self.get(id)
        if existing is not None:
            return existing, False
        look = await self.create(id=id, **fields)
        return look, True

    async def merge_update(self, id: str, fields: Dict[str, Any]) -> Optional[FashionLook]:
        """Overwrite only the provided fields; None values keep the stored value."""
        provided = {key: value for key, value in fields.items() if value is not None}
        return await self.update(id, **provided)
