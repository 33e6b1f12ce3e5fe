"""FastAPI endpoints for look management.

Reads are public. Every mutation declares ``get_current_admin``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from styleinspo.api.dependencies import get_look_service
from styleinspo.core.logging import monitor_performance
from styleinspo.core.security import get_current_admin
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.models.domain.common import SuccessResponse
from styleinspo.models.domain.look import (
    FashionItem,
    FashionItemUpdate,
    LookCreate,
    LookResponse,
    LookUpdate
)
from styleinspo.models.domain.seo import SEOGenerationResponse
from styleinspo.services.looks import LookService

router = APIRouter()


@router.get("", response_model=List[LookResponse])
async def list_looks(
    q: Optional[str] = Query(None, max_length=200, description="Gallery search terms"),
    looks: LookService = Depends(get_look_service)
):
    """All looks, newest first. ``q`` keeps looks matching every term."""
    return await looks.list_looks(q)


@router.post("", response_model=LookResponse, status_code=status.HTTP_201_CREATED)
@monitor_performance("create_look")
async def create_look(
    look_data: LookCreate,
    response: Response,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    """Create a look. A repeated id returns the stored look with 200."""
    look, created = await looks.create_look(look_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return look


@router.get("/{look_id}", response_model=LookResponse)
async def get_look(look_id: str, looks: LookService = Depends(get_look_service)):
    return await looks.get_look(look_id)


@router.put("/{look_id}", response_model=LookResponse)
@monitor_performance("update_look")
async def update_look(
    look_id: str,
    look_update: LookUpdate,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    """Partial update; omitted fields keep their stored values."""
    return await looks.update_look(look_id, look_update)


@router.delete("/{look_id}", response_model=SuccessResponse)
@monitor_performance("delete_look")
async def delete_look(
    look_id: str,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    """Delete a look after cleaning up its hosted images."""
    await looks.delete_look(look_id)
    return SuccessResponse(message="Look deleted")


@router.post("/{look_id}/items", response_model=LookResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    look_id: str,
    item: FashionItem,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    return await looks.add_item(look_id, item)


@router.put("/{look_id}/items/{item_id}", response_model=LookResponse)
async def update_item(
    look_id: str,
    item_id: str,
    changes: FashionItemUpdate,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    return await looks.update_item(look_id, item_id, changes)


@router.delete("/{look_id}/items/{item_id}", response_model=LookResponse)
async def remove_item(
    look_id: str,
    item_id: str,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    return await looks.remove_item(look_id, item_id)


@router.post(
    "/{look_id}/seo",
    response_model=SEOGenerationResponse,
    response_model_exclude_none=True
)
@monitor_performance("regenerate_seo")
async def regenerate_seo(
    look_id: str,
    admin: AdminIdentity = Depends(get_current_admin),
    looks: LookService = Depends(get_look_service)
):
    """Regenerate and store SEO content. Stored SEO survives a failed run."""
    result = await looks.regenerate_seo(look_id)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": result.error}
        )
    return result
