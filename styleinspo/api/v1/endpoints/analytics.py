"""Analytics endpoints.

Tracking calls answer 202 straight away; the insert runs as a background
task on its own session and never fails the caller.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status

from styleinspo.api.dependencies import get_analytics_service, get_request_context
from styleinspo.core.security import get_current_admin
from styleinspo.models.domain.analytics import (
    AffiliateClickCreate,
    AnalyticsSummary,
    PageViewCreate,
    RequestContext,
    TrackingAccepted
)
from styleinspo.models.domain.auth import AdminIdentity
from styleinspo.services.analytics import AnalyticsService

router = APIRouter()


@router.post(
    "/page-view",
    response_model=TrackingAccepted,
    status_code=status.HTTP_202_ACCEPTED
)
async def track_page_view(
    event: PageViewCreate,
    background_tasks: BackgroundTasks,
    context: RequestContext = Depends(get_request_context),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    background_tasks.add_task(analytics.record_page_view, event, context)
    return TrackingAccepted()


@router.post(
    "/affiliate-click",
    response_model=TrackingAccepted,
    status_code=status.HTTP_202_ACCEPTED
)
async def track_affiliate_click(
    event: AffiliateClickCreate,
    background_tasks: BackgroundTasks,
    context: RequestContext = Depends(get_request_context),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    background_tasks.add_task(analytics.record_affiliate_click, event, context)
    return TrackingAccepted()


@router.get("/summary", response_model=AnalyticsSummary)
async def get_summary(
    admin: AdminIdentity = Depends(get_current_admin),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    return await analytics.get_summary()
