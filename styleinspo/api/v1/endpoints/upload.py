"""Image upload endpoint."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from styleinspo.api.dependencies import get_media_gateway
from styleinspo.core.exceptions import ValidationError
from styleinspo.core.logging import monitor_performance
from styleinspo.core.security import get_current_admin
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.services.media import MediaGateway

router = APIRouter()


@router.post("", response_model=Dict[str, str])
@monitor_performance("upload_image")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    admin: AdminIdentity = Depends(get_current_admin),
    media: MediaGateway = Depends(get_media_gateway)
):
    """Store an image and return its public URL."""
    if file is None:
        raise ValidationError("No file provided")
    data = await file.read()
    url = await media.upload(data, filename=file.filename, content_type=file.content_type)
    return {"url": url}
