"""Stateless SEO generation endpoint."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from styleinspo.api.dependencies import get_seo_generator
from styleinspo.core.exceptions import ValidationError
from styleinspo.core.logging import get_logger, monitor_performance
from styleinspo.core.security import get_current_admin
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.models.domain.seo import SEOGenerationRequest, SEOGenerationResponse
from styleinspo.services.seo import SEOContentGenerator

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/generate",
    response_model=SEOGenerationResponse,
    response_model_exclude_none=True
)
@monitor_performance("generate_seo")
async def generate_seo(
    request: SEOGenerationRequest,
    admin: AdminIdentity = Depends(get_current_admin),
    generator: SEOContentGenerator = Depends(get_seo_generator)
):
    """Generate SEO content for a look without storing it."""
    if not request.main_image.strip():
        raise ValidationError("Main image URL is required")

    logger.info("Generating SEO content", look_id=request.look_id, items=len(request.items))
    result = await generator.generate(request)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": result.error}
        )
    return result
