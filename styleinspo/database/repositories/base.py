"""Base repository implementation for database operations.

This module provides a generic repository pattern implementation with common
database operations that can be inherited by specific repositories.

Features:
- Generic CRUD operations keyed by primary key

Repositories only flush. Committing is left to the service that owns the unit
of work.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from styleinspo.models.database.base import Base
from styleinspo.core.logging import get_logger

# Type variable for models
ModelType = TypeVar("ModelType", bound=Base)
logger = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations."""

    model: Type[ModelType]

    def __init__(self, session: AsyncSession):
        """Initialize repository with session.

        Args:
            session: AsyncSession instance
        """
        self.session = session

    async def create(self, **kwargs) -> ModelType:
        """Create a new record.

        Args:
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        try:
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            return instance
        except Exception as e:
            logger.error(f"Create failed for {self.model.__name__}", error=e)
            raise

    async def get(self, id: Any) -> Optional[ModelType]:
        """Get record by ID.

        Returns:
            Model instance if found, None otherwise
        """
        try:
            return await self.session.get(self.model, id)
        except Exception as e:
            logger.error(f"Get failed for {self.model.__name__}", error=e, id=id)
            raise

    async def update(self, id: Any, **kwargs) -> Optional[ModelType]:
        """Update the given fields of a record.

        Returns:
            Updated model instance, None when the record does not exist
        """
        try:
            instance = await self.get(id)
            if instance is None:
                return None
            for field, value in kwargs.items():
                setattr(instance, field, value)
            await self.session.flush()
            return instance
        except Exception as e:
            logger.error(f"Update failed for {self.model.__name__}", error=e, id=id)
            raise

    async def delete(self, id: Any) -> bool:
        """Delete a record by ID if it exists.

        Returns:
            True if a row was deleted, False otherwise
        """
        try:
            query = delete(self.model).where(self.model.id == id)
            result = await self.session.execute(query)
            return result.rowcount > 0
        except Exception as e:
            logger.error(f"Delete failed for {self.model.__name__}", error=e, id=id)
            raise

