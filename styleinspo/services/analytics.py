"""Analytics capture and reporting.

Recording is fire-and-forget: each event is written on its own session and
any failure is logged and swallowed, so the page render or click that
triggered it is never affected.
"""

from typing import Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from styleinspo.core.exceptions import PersistenceError
from styleinspo.core.logging import get_logger
from styleinspo.database.repositories.analytics import AnalyticsRepository
from styleinspo.database.session import SessionManager, with_tracing
from styleinspo.models.database.analytics import MAX_IP_LENGTH
from styleinspo.models.domain.analytics import (
    AffiliateClickCreate,
    AnalyticsSummary,
    DailyViewCount,
    LookClickCount,
    LookViewCount,
    PageViewCreate,
    PageViewRecord,
    RequestContext
)

logger = get_logger(__name__)


def client_ip(headers: Mapping[str, str]) -> Optional[str]:
    """First ``x-forwarded-for`` entry, else ``x-real-ip``, else None."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first[:MAX_IP_LENGTH]
    real_ip = (headers.get("x-real-ip") or "").strip()
    return real_ip[:MAX_IP_LENGTH] or None


def request_context(headers: Mapping[str, str]) -> RequestContext:
    return RequestContext(
        user_agent=headers.get("user-agent"),
        ip_address=client_ip(headers),
        referrer=headers.get("referer")
    )


class AnalyticsService:
    """Record page views and affiliate clicks; summarize them for the dashboard."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def record_page_view(self, event: PageViewCreate, context: RequestContext) -> bool:
        """Insert a page view. Returns False instead of raising on failure."""
        try:
            async with self.session_manager.transaction() as session:
                await AnalyticsRepository(session).add_page_view(
                    page_path=event.page_path,
                    look_id=event.look_id,
                    user_agent=context.user_agent,
                    ip_address=context.ip_address,
                    referrer=context.referrer
                )
            return True
        except Exception as e:
            logger.error("Failed to record page view", error=e, page_path=event.page_path)
            return False

    async def record_affiliate_click(
        self,
        event: AffiliateClickCreate,
        context: RequestContext
    ) -> bool:
        """Insert an affiliate click. Returns False instead of raising on failure."""
        try:
            async with self.session_manager.transaction() as session:
                await AnalyticsRepository(session).add_affiliate_click(
                    look_id=event.look_id,
                    item_id=event.item_id,
                    item_name=event.item_name,
                    affiliate_url=event.affiliate_url,
                    user_agent=context.user_agent,
                    ip_address=context.ip_address
                )
            return True
        except Exception as e:
            logger.error(
                "Failed to record affiliate click",
                error=e,
                look_id=event.look_id,
                item_id=event.item_id
            )
            return False

    @with_tracing
    async def get_summary(self) -> AnalyticsSummary:
        try:
            async with self.session_manager.session() as session:
                repo = AnalyticsRepository(session)
                top_looks = await repo.top_looks_by_views()
                recent = await repo.recent_page_views()
                clicks = await repo.clicks_by_look()
                daily = await repo.daily_views()
                return AnalyticsSummary(
                    top_looks=[LookViewCount(**row) for row in top_looks],
                    recent_views=[PageViewRecord.model_validate(view) for view in recent],
                    clicks_by_look=[LookClickCount(**row) for row in clicks],
                    daily_views=[DailyViewCount(**row) for row in daily]
                )
        except SQLAlchemyError as e:
            logger.error("Failed to load analytics summary", error=e)
            raise PersistenceError("Failed to fetch analytics") from e
