# styleinspo/database/repositories/analytics.py
"""Repository for analytics events and the dashboard aggregates."""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from styleinspo.models.database.analytics import PageView, AffiliateClick
from styleinspo.models.database.base import utcnow
from styleinspo.models.database.look import FashionLook

TOP_LOOKS_LIMIT = 10
RECENT_VIEWS_LIMIT = 50
CLICK_WINDOW_DAYS = 30
DAILY_WINDOW_DAYS = 7


class AnalyticsRepository:
    """Append-only event inserts plus read-only aggregate queries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_page_view(
        self,
        page_path: str,
        look_id: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        referrer: Optional[str] = None
    ) -> PageView:
        view = PageView(
            page_path=page_path,
            look_id=look_id,
            user_agent=user_agent,
            ip_address=ip_address,
            referrer=referrer
        )
        self.session.add(view)
        await self.session.flush()
        return view

    async def add_affiliate_click(
        self,
        look_id: str,
        item_id: str,
        affiliate_url: str,
        item_name: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None
    ) -> AffiliateClick:
        click = AffiliateClick(
            look_id=look_id,
            item_id=item_id,
            item_name=item_name,
            affiliate_url=affiliate_url,
            user_agent=user_agent,
            ip_address=ip_address
        )
        self.session.add(click)
        await self.session.flush()
        return click

    async def top_looks_by_views(self, limit: int = TOP_LOOKS_LIMIT) -> List[Dict[str, Any]]:
        """Looks ranked by view count. Looks without views appear with 0."""
        view_count = func.count(PageView.id).label("view_count")
        query = (
            select(FashionLook.id, FashionLook.title, view_count)
            .outerjoin(PageView, PageView.look_id == FashionLook.id)
            .group_by(FashionLook.id, FashionLook.title)
            .order_by(view_count.desc(), FashionLook.id)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [
            {"look_id": row.id, "title": row.title, "view_count": row.view_count}
            for row in result
        ]

    async def recent_page_views(self, limit: int = RECENT_VIEWS_LIMIT) -> List[PageView]:
        query = (
            select(PageView)
            .order_by(PageView.created_at.desc(), PageView.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def clicks_by_look(self, days: int = CLICK_WINDOW_DAYS) -> List[Dict[str, Any]]:
        """Affiliate clicks in the trailing window, grouped by look."""
        since = utcnow() - timedelta(days=days)
        click_count = func.count(AffiliateClick.id).label("click_count")
        query = (
            select(AffiliateClick.look_id, FashionLook.title, click_count)
            .outerjoin(FashionLook, FashionLook.id == AffiliateClick.look_id)
            .where(AffiliateClick.created_at >= since)
            .group_by(AffiliateClick.look_id, FashionLook.title)
            .order_by(click_count.desc(), AffiliateClick.look_id)
        )
        result = await self.session.execute(query)
        return [
            {
                "look_id": row.look_id,
                "title": row.title,
                "click_count": row.click_count
            }
            for row in result
        ]

    async def daily_views(self, days: int = DAILY_WINDOW_DAYS) -> List[Dict[str, Any]]:
        """Page views per calendar day over the trailing window, oldest first."""
        since = utcnow() - timedelta(days=days)
        day = func.date(PageView.created_at).label("day")
        view_count = func.count(PageView.id).label("view_count")
        query = (
            select(day, view_count)
            .where(PageView.created_at >= since)
            .group_by(day)
            .order_by(day)
        )
        result = await self.session.execute(query)
        # PostgreSQL returns a date, SQLite a string
        return [{"day": str(row.day), "view_count": row.view_count} for row in result]
