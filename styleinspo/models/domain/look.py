# styleinspo/models/domain/look.py
"""Pydantic models for looks, their items and the derived SEO bundle.

The nested bundles (``SEOData``, ``AIAnalysis``) are stored as JSON columns but
always pass through these models on the way in and out, so a stored bundle is
either present with its full shape or absent.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import Field, field_validator

from .common import CamelModel


class Occasion(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    DATE_NIGHT = "date-night"
    FORMAL = "formal"
    STREET_STYLE = "street-style"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


def new_item_id() -> str:
    return uuid4().hex


def clean_tags(tags: List[str]) -> List[str]:
    return [tag.strip() for tag in tags if tag and tag.strip()]


class FashionItem(CamelModel):
    """One shoppable piece within a look."""
    id: str = Field(default_factory=new_item_id, min_length=1)
    name: str = ""
    price: str = ""
    affiliate_link: str = ""
    image: str = ""
    category: str = ""
    background_color: Optional[str] = None


class FashionItemUpdate(CamelModel):
    """Partial item edit; omitted fields keep their value."""
    name: Optional[str] = None
    price: Optional[str] = None
    affiliate_link: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    background_color: Optional[str] = None


class KeywordSet(CamelModel):
    primary: List[str] = Field(default_factory=list)
    secondary: List[str] = Field(default_factory=list)
    long_tail: List[str] = Field(default_factory=list)


class InternalLink(CamelModel):
    text: str
    url: str


class ContentSection(CamelModel):
    heading: str
    content: str


class SEOData(CamelModel):
    """Search-engine facing content generated for a look."""
    page_title: str
    meta_description: str
    url_slug: str
    h1: str
    h2s: List[str] = Field(default_factory=list)
    outfit_description: str = ""
    styling_tips: List[str] = Field(default_factory=list)
    occasion_guide: str = ""
    item_descriptions: Dict[str, str] = Field(default_factory=dict)
    keywords: KeywordSet = Field(default_factory=KeywordSet)
    image_alt_text: str = ""
    item_alt_texts: Dict[str, str] = Field(default_factory=dict)
    schema_markup: Dict[str, Any] = Field(default_factory=dict)
    internal_links: List[InternalLink] = Field(default_factory=list)
    content_sections: List[ContentSection] = Field(default_factory=list)


class AIAnalysis(CamelModel):
    """Snapshot of what the vision step detected. Descriptive only."""
    detected_items: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    style_aesthetic: str = "modern fashion"
    occasion: str = "casual"
    season: str = "versatile"
    price_range: str = ""
    body_type_suitability: List[str] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class LookBase(CamelModel):
    """Fields shared by look create and response payloads."""
    title: str = Field(..., min_length=1, max_length=500)
    main_image: str = Field(..., min_length=1)
    items: List[FashionItem] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    seo: Optional[SEOData] = None
    ai_analysis: Optional[AIAnalysis] = None
    occasion: Optional[Occasion] = None
    season: Optional[Season] = None
    seo_last_updated: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: List[str]) -> List[str]:
        return clean_tags(v)


class LookCreate(LookBase):
    """Schema for creating a look; the id is assigned by the client."""
    id: str = Field(..., min_length=1, max_length=200)


class LookUpdate(CamelModel):
    """Partial look update. Omitted or null fields keep their stored value."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    main_image: Optional[str] = Field(None, min_length=1)
    items: Optional[List[FashionItem]] = None
    tags: Optional[List[str]] = None
    seo: Optional[SEOData] = None
    ai_analysis: Optional[AIAnalysis] = None
    occasion: Optional[Occasion] = None
    season: Optional[Season] = None
    seo_last_updated: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return clean_tags(v)


class LookResponse(LookBase):
    """Schema for look response."""
    id: str
    created_at: datetime
