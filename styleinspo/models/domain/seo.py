# styleinspo/models/domain/seo.py
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from .common import CamelModel
from .look import AIAnalysis, FashionItem, SEOData


class SEOGenerationRequest(CamelModel):
    """Input for the SEO content generator."""
    look_id: str = ""
    main_image: str = Field(
        "",
        validation_alias=AliasChoices("mainImage", "mainImageUrl", "main_image")
    )
    title: str = ""
    tags: List[str] = Field(default_factory=list)
    items: List[FashionItem] = Field(default_factory=list)
    user_occasion: Optional[str] = None
    user_season: Optional[str] = None


class SEOGenerationResponse(CamelModel):
    """Result of a generation attempt. ``success`` false carries ``error``."""
    success: bool
    seo_data: Optional[SEOData] = None
    ai_analysis: Optional[AIAnalysis] = None
    error: Optional[str] = None


class VisionAnalysisResult(CamelModel):
    """Structured fields obtained from a vision provider."""
    detected_items: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    style_aesthetic: str = "modern fashion"
    occasion: str = "casual"
    season: str = "current"
    visual_description: str = ""
    provider: Optional[str] = None


class StructuredVisionOutput(BaseModel):
    """Response format requested from structured-output vision models."""
    detectedItems: List[str]
    colors: List[str]
    styleAesthetic: str
    occasion: str
    season: str
    visualDescription: str
