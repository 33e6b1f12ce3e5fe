"""Look lifecycle service.

Handles create/read/update/delete over the look aggregate and its items:
- Creates are idempotent on the client-assigned id
- Updates merge the provided fields over the stored record
- Deletes reclaim gateway-hosted images before removing the row
- Per-item SEO maps follow item adds, edits and removals
"""

import asyncio
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from styleinspo.core.exceptions import NotFoundError, PersistenceError
from styleinspo.core.logging import get_logger
from styleinspo.database.repositories.looks import LookRepository
from styleinspo.database.session import SessionManager, with_tracing
from styleinspo.models.database.base import utcnow
from styleinspo.models.database.look import FashionLook
from styleinspo.models.domain.common import CamelModel
from styleinspo.models.domain.look import (
    AIAnalysis,
    FashionItem,
    FashionItemUpdate,
    LookBase,
    LookCreate,
    LookResponse,
    LookUpdate,
    SEOData
)
from styleinspo.models.domain.seo import SEOGenerationRequest, SEOGenerationResponse
from styleinspo.services.media import MediaGateway
from styleinspo.services.search import filter_looks
from styleinspo.services.seo import SEOContentGenerator, reconcile_item_seo

logger = get_logger(__name__)


def _column_value(value: Any) -> Any:
    """Convert a domain value to what the JSON/text columns store."""
    if isinstance(value, CamelModel):
        return value.to_json_dict()
    if isinstance(value, list):
        return [_column_value(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


def _items_of(look: FashionLook) -> List[FashionItem]:
    return [FashionItem.model_validate(item) for item in look.items or []]


def _seo_of(look: FashionLook) -> Optional[SEOData]:
    return SEOData.model_validate(look.seo) if look.seo else None


def _analysis_of(look: FashionLook) -> Optional[AIAnalysis]:
    return AIAnalysis.model_validate(look.ai_analysis) if look.ai_analysis else None


def to_response(look: FashionLook) -> LookResponse:
    return LookResponse.model_validate(look)


class LookService:
    """Service for managing looks and their items."""

    def __init__(
        self,
        session_manager: SessionManager,
        media: MediaGateway,
        generator: SEOContentGenerator
    ):
        self.session_manager = session_manager
        self.media = media
        self.generator = generator

    @asynccontextmanager
    async def _unit_of_work(self, operation: str, **context) -> AsyncGenerator[AsyncSession, None]:
        """Transaction that reports storage failures as ``PersistenceError``."""
        try:
            async with self.session_manager.transaction() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Look {operation} failed", error=e, operation=operation, **context)
            raise PersistenceError(f"Failed to {operation} look") from e

    async def _get_or_404(self, repo: LookRepository, look_id: str) -> FashionLook:
        look = await repo.get(look_id)
        if look is None:
            raise NotFoundError("Look not found")
        return look

    @with_tracing
    async def list_looks(self, query: Optional[str] = None) -> List[LookResponse]:
        """All looks newest first, narrowed by the gallery search query."""
        async with self._unit_of_work("list") as session:
            looks = await LookRepository(session).list_newest_first()
            responses = [to_response(look) for look in looks]
        return filter_looks(responses, query)

    @with_tracing
    async def get_look(self, look_id: str) -> LookResponse:
        async with self._unit_of_work("load", look_id=look_id) as session:
            look = await self._get_or_404(LookRepository(session), look_id)
            return to_response(look)

    @with_tracing
    async def create_look(self, data: LookCreate) -> Tuple[LookResponse, bool]:
        """Store a new look unless the id is taken.

        Returns:
            The stored look and whether this call created it
        """
        fields = {
            name: _column_value(getattr(data, name))
            for name in LookBase.model_fields
        }
        if data.seo is not None:
            fields["seo"] = reconcile_item_seo(
                data.seo, data.items, data.ai_analysis
            ).to_json_dict()

        try:
            async with self._unit_of_work("create", look_id=data.id) as session:
                look, created = await LookRepository(session).create_if_absent(data.id, **fields)
                response = to_response(look)
        except PersistenceError as e:
            # A concurrent create with the same id won the insert
            if not isinstance(e.__cause__, IntegrityError):
                raise
            return await self.get_look(data.id), False

        if created:
            logger.info("Look created", look_id=data.id, items=len(data.items))
        else:
            logger.info("Look already exists, returning stored record", look_id=data.id)
        return response, created

    @with_tracing
    async def update_look(self, look_id: str, data: LookUpdate) -> LookResponse:
        """Overwrite only the fields present and non-null in ``data``."""
        async with self._unit_of_work("update", look_id=look_id) as session:
            repo = LookRepository(session)
            look = await self._get_or_404(repo, look_id)

            fields: Dict[str, Any] = {
                name: _column_value(getattr(data, name))
                for name in data.model_fields_set
            }

            if data.items is not None or data.seo is not None:
                seo = data.seo or _seo_of(look)
                if seo is not None:
                    items = data.items if data.items is not None else _items_of(look)
                    analysis = data.ai_analysis or _analysis_of(look)
                    fields["seo"] = reconcile_item_seo(seo, items, analysis).to_json_dict()

            look = await repo.merge_update(look_id, fields)
            response = to_response(look)

        logger.info("Look updated", look_id=look_id, fields=sorted(fields))
        return response

    async def _delete_images(self, look_id: str, urls: List[str]) -> None:
        """Delete every gateway-hosted image concurrently; failures are logged only."""
        public_ids = []
        for url in urls:
            public_id = self.media.extract_public_id(url)
            if public_id and public_id not in public_ids:
                public_ids.append(public_id)
        if not public_ids:
            return

        results = await asyncio.gather(
            *(self.media.delete(public_id) for public_id in public_ids),
            return_exceptions=True
        )
        for public_id, result in zip(public_ids, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Image cleanup raised",
                    error=result,
                    look_id=look_id,
                    public_id=public_id
                )
            elif not result:
                logger.warning(
                    "Image cleanup failed",
                    look_id=look_id,
                    public_id=public_id
                )

    @with_tracing
    async def delete_look(self, look_id: str) -> None:
        """Reclaim the look's hosted images, then delete the row."""
        async with self._unit_of_work("load", look_id=look_id) as session:
            look = await self._get_or_404(LookRepository(session), look_id)
            urls = [look.main_image] + [item.image for item in _items_of(look) if item.image]

        await self._delete_images(look_id, urls)

        async with self._unit_of_work("delete", look_id=look_id) as session:
            deleted = await LookRepository(session).delete(look_id)

        # A concurrent delete may have removed the row already
        logger.info("Look deleted", look_id=look_id, row_deleted=deleted)

    async def _save_items(
        self,
        repo: LookRepository,
        look: FashionLook,
        items: List[FashionItem]
    ) -> FashionLook:
        fields: Dict[str, Any] = {"items": _column_value(items)}
        seo = _seo_of(look)
        if seo is not None:
            fields["seo"] = reconcile_item_seo(seo, items, _analysis_of(look)).to_json_dict()
        return await repo.update(look.id, **fields)

    @with_tracing
    async def add_item(self, look_id: str, item: FashionItem) -> LookResponse:
        async with self._unit_of_work("update", look_id=look_id) as session:
            repo = LookRepository(session)
            look = await self._get_or_404(repo, look_id)
            items = [i for i in _items_of(look) if i.id != item.id] + [item]
            look = await self._save_items(repo, look, items)
            response = to_response(look)

        logger.info("Item added", look_id=look_id, item_id=item.id)
        return response

    @with_tracing
    async def update_item(
        self,
        look_id: str,
        item_id: str,
        changes: FashionItemUpdate
    ) -> LookResponse:
        async with self._unit_of_work("update", look_id=look_id) as session:
            repo = LookRepository(session)
            look = await self._get_or_404(repo, look_id)
            items = _items_of(look)
            index = next((i for i, item in enumerate(items) if item.id == item_id), None)
            if index is None:
                raise NotFoundError("Item not found")

            provided = {
                name: getattr(changes, name)
                for name in changes.model_fields_set
                if getattr(changes, name) is not None
            }
            items[index] = items[index].model_copy(update=provided)
            look = await self._save_items(repo, look, items)
            response = to_response(look)

        logger.info("Item updated", look_id=look_id, item_id=item_id)
        return response

    @with_tracing
    async def remove_item(self, look_id: str, item_id: str) -> LookResponse:
        async with self._unit_of_work("update", look_id=look_id) as session:
            repo = LookRepository(session)
            look = await self._get_or_404(repo, look_id)
            items = _items_of(look)
            removed = next((item for item in items if item.id == item_id), None)
            if removed is None:
                raise NotFoundError("Item not found")

            remaining = [item for item in items if item.id != item_id]
            look = await self._save_items(repo, look, remaining)
            response = to_response(look)

        still_shown = {response.main_image} | {item.image for item in response.items if item.image}
        if removed.image and removed.image not in still_shown:
            await self._delete_images(look_id, [removed.image])

        logger.info("Item removed", look_id=look_id, item_id=item_id)
        return response

    async def regenerate_seo(self, look_id: str) -> SEOGenerationResponse:
        """Generate SEO for a stored look and persist it only on success."""
        look = await self.get_look(look_id)
        result = await self.generator.generate(SEOGenerationRequest(
            look_id=look.id,
            main_image=look.main_image,
            title=look.title,
            tags=look.tags,
            items=look.items,
            user_occasion=look.occasion.value if look.occasion else None,
            user_season=look.season.value if look.season else None
        ))
        if not result.success:
            logger.warning(
                "SEO regeneration failed, keeping stored SEO",
                look_id=look_id,
                reason=result.error
            )
            return result

        async with self._unit_of_work("update", look_id=look_id) as session:
            repo = LookRepository(session)
            stored = await self._get_or_404(repo, look_id)
            # Items may have changed while the generator ran
            seo = reconcile_item_seo(result.seo_data, _items_of(stored), result.ai_analysis)
            await repo.update(
                look_id,
                seo=seo.to_json_dict(),
                ai_analysis=result.ai_analysis.to_json_dict(),
                seo_last_updated=utcnow()
            )

        logger.info("SEO regenerated", look_id=look_id)
        return result.model_copy(update={"seo_data": seo})
