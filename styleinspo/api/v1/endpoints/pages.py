"""Editable page copy endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from styleinspo.core.exceptions import NotFoundError, PersistenceError
from styleinspo.core.logging import get_logger
from styleinspo.core.security import get_current_admin
from styleinspo.database.repositories.pages import PageRepository
from styleinspo.database.session import get_session
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.models.domain.page import PageResponse, PageUpdate

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=List[PageResponse])
async def list_pages(db: AsyncSession = Depends(get_session)):
    return await PageRepository(db).list_all()


@router.get("/{page_id}", response_model=PageResponse)
async def get_page(page_id: str, db: AsyncSession = Depends(get_session)):
    page = await PageRepository(db).get(page_id)
    if page is None:
        raise NotFoundError("Page not found")
    return page


@router.put("/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: str,
    changes: PageUpdate,
    admin: AdminIdentity = Depends(get_current_admin),
    db: AsyncSession = Depends(get_session)
):
    fields = {
        name: getattr(changes, name)
        for name in ("title", "content")
        if getattr(changes, name) is not None
    }
    try:
        page = await PageRepository(db).update(page_id, **fields)
        if page is None:
            raise NotFoundError("Page not found")
        await db.commit()
    except SQLAlchemyError as e:
        logger.error("Failed to update page", error=e, page_id=page_id)
        raise PersistenceError("Failed to update page") from e

    logger.info("Page updated", page_id=page_id)
    return page
