# styleinspo/models/domain/analytics.py
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel


@dataclass
class RequestContext:
    """Visitor details captured alongside an analytics event."""
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    referrer: Optional[str] = None


class PageViewCreate(CamelModel):
    page_path: str = Field(..., min_length=1, max_length=2000)
    look_id: Optional[str] = None


class AffiliateClickCreate(CamelModel):
    look_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    item_name: Optional[str] = None
    affiliate_url: str = Field(..., min_length=1, max_length=4000)


class TrackingAccepted(CamelModel):
    success: bool = True


class LookViewCount(CamelModel):
    look_id: str
    title: str
    view_count: int


class PageViewRecord(CamelModel):
    id: int
    page_path: str
    look_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    referrer: Optional[str] = None
    created_at: datetime


class LookClickCount(CamelModel):
    look_id: str
    title: Optional[str] = None
    click_count: int


class DailyViewCount(CamelModel):
    day: str
    view_count: int


class AnalyticsSummary(CamelModel):
    """Read-only aggregates for the admin dashboard."""
    top_looks: List[LookViewCount]
    recent_views: List[PageViewRecord]
    clicks_by_look: List[LookClickCount]
    daily_views: List[DailyViewCount]
