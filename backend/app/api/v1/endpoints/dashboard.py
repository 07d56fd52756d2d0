from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.config import settings
from app.models.user import User
from app.models.schemas import (
    DashboardStatsResponse,
    InfluencerListResponse,
    InfluencerResponse,
    PlatformCount,
    CategoryCount,
)
from app.api.deps import get_current_user
from app.services.influencer_service import InfluencerService

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Overview numbers for the dashboard: total records, per-platform counts,
    the three biggest main categories, recent additions and the latest page.
    """
    stats = await InfluencerService(db).dashboard_stats()
    page_size = settings.DASHBOARD_PAGE_SIZE

    return DashboardStatsResponse(
        total_influencers=stats["total_influencers"],
        platform_counts=[PlatformCount(**row) for row in stats["platform_counts"]],
        top_categories=[CategoryCount(**row) for row in stats["top_categories"]],
        recent_count=stats["recent_count"],
        recent_days=stats["recent_days"],
        latest=InfluencerListResponse(
            data=[InfluencerResponse.model_validate(influencer) for influencer in stats["latest"]],
            total=stats["latest_total"],
            page=1,
            page_size=page_size,
            total_pages=InfluencerService.total_pages(stats["latest_total"], page_size),
        ),
    )
