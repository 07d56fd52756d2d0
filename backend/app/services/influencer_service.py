"""
Influencer service: filtered listing, single-record CRUD, filter options
and dashboard aggregation.
"""
import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, and_, or_, cast, String, desc, asc
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.exceptions import BusinessLogicError
from app.models.influencer import Influencer, InfluencerStatus, Platform
from app.models.schemas import InfluencerCreate, InfluencerUpdate
from app.services.importer.platforms import normalize_platform
from app.services.importer.row_processor import derive_engagement_rate, derive_handle, format_rate
from app.utils import days_ago_naive, escape_like_pattern, split_tokens, utcnow_naive

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "followers": Influencer.followers,
    "engagement_rate": Influencer.engagement_rate,
    "engagementRate": Influencer.engagement_rate,
    "created_at": Influencer.created_at,
    "createdAt": Influencer.created_at,
}
SORT_DIRECTIONS = ("asc", "desc")


@dataclass
class InfluencerFilters:
    """AND-combined list filters. Empty lists and None values are ignored."""
    search: Optional[str] = None
    platforms: Optional[List[Platform]] = None
    countries: Optional[List[str]] = None
    cities: Optional[List[str]] = None
    main_categories: Optional[List[str]] = None
    statuses: Optional[List[InfluencerStatus]] = None
    followers_min: Optional[int] = None
    followers_max: Optional[int] = None
    avg_likes_min: Optional[int] = None
    avg_likes_max: Optional[int] = None
    engagement_rate_min: Optional[Decimal] = None
    engagement_rate_max: Optional[Decimal] = None
    collab_types: Optional[List[str]] = None
    tags: Optional[List[str]] = None


def parse_platform_list(text: Optional[str]) -> Optional[List[Platform]]:
    """Comma separated platform query value -> platforms (aliases accepted)."""
    if not text:
        return None
    platforms = []
    for token in split_tokens(text):
        platform = normalize_platform(token)
        if platform is None:
            raise BusinessLogicError(f"Invalid platform: {token}")
        platforms.append(platform)
    return platforms or None


def parse_status_list(text: Optional[str]) -> Optional[List[InfluencerStatus]]:
    if not text:
        return None
    statuses = []
    for token in split_tokens(text):
        try:
            statuses.append(InfluencerStatus(token.lower()))
        except ValueError:
            raise BusinessLogicError(f"Invalid status: {token}")
    return statuses or None


def parse_text_list(text: Optional[str]) -> Optional[List[str]]:
    if not text:
        return None
    return split_tokens(text) or None


def resolve_sort(sort_field: str, sort_direction: str):
    """
    Validate sort parameters and build the ORDER BY clause.

    Raises:
        BusinessLogicError: For unknown fields or directions
    """
    column = SORT_COLUMNS.get(sort_field)
    if column is None:
        raise BusinessLogicError(
            f"Invalid sort field: {sort_field}",
            {"allowed": ["followers", "engagement_rate", "created_at"]}
        )

    direction = sort_direction.lower()
    if direction not in SORT_DIRECTIONS:
        raise BusinessLogicError(
            f"Invalid sort direction: {sort_direction}",
            {"allowed": list(SORT_DIRECTIONS)}
        )

    # Unknown counts go last in both directions
    if direction == "asc":
        return asc(column).nulls_last()
    return desc(column).nulls_last()


def build_conditions(filters: InfluencerFilters) -> list:
    conditions = []

    if filters.search and filters.search.strip():
        pattern = f"%{escape_like_pattern(filters.search.strip())}%"
        conditions.append(
            or_(
                Influencer.name.ilike(pattern, escape='\\'),
                Influencer.handle.ilike(pattern, escape='\\'),
                Influencer.notes_summary.ilike(pattern, escape='\\'),
                cast(Influencer.tags, String).ilike(pattern, escape='\\'),
            )
        )

    if filters.platforms:
        conditions.append(Influencer.platform.in_(filters.platforms))
    if filters.countries:
        conditions.append(Influencer.country.in_(filters.countries))
    if filters.cities:
        conditions.append(Influencer.city.in_(filters.cities))
    if filters.main_categories:
        conditions.append(Influencer.main_category.in_(filters.main_categories))
    if filters.statuses:
        conditions.append(Influencer.status.in_(filters.statuses))

    if filters.followers_min is not None:
        conditions.append(Influencer.followers >= filters.followers_min)
    if filters.followers_max is not None:
        conditions.append(Influencer.followers <= filters.followers_max)
    if filters.avg_likes_min is not None:
        conditions.append(Influencer.avg_likes >= filters.avg_likes_min)
    if filters.avg_likes_max is not None:
        conditions.append(Influencer.avg_likes <= filters.avg_likes_max)
    if filters.engagement_rate_min is not None:
        conditions.append(Influencer.engagement_rate >= filters.engagement_rate_min)
    if filters.engagement_rate_max is not None:
        conditions.append(Influencer.engagement_rate <= filters.engagement_rate_max)

    # Array overlap (&&): any of the requested values
    if filters.collab_types:
        conditions.append(Influencer.collab_types.overlap(filters.collab_types))
    if filters.tags:
        conditions.append(Influencer.tags.overlap(filters.tags))

    return conditions


class InfluencerService:
    """Database operations on influencer records"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_influencers(
        self,
        filters: Optional[InfluencerFilters] = None,
        sort_field: str = "created_at",
        sort_direction: str = "desc",
        page: int = 1,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
    ) -> Tuple[List[Influencer], int]:
        """
        Filtered, sorted, paginated listing.

        Returns:
            (influencers on the requested page, total matching count)
        """
        order_by = resolve_sort(sort_field, sort_direction)
        conditions = build_conditions(filters or InfluencerFilters())
        where_clause = and_(*conditions) if conditions else None

        count_query = select(func.count(Influencer.id))
        query = select(Influencer)
        if where_clause is not None:
            count_query = count_query.where(where_clause)
            query = query.where(where_clause)

        total = (await self.db.execute(count_query)).scalar() or 0

        offset = (page - 1) * page_size
        result = await self.db.execute(
            query.order_by(order_by, desc(Influencer.id)).offset(offset).limit(page_size)
        )
        return list(result.scalars().all()), total

    @staticmethod
    def total_pages(total: int, page_size: int) -> int:
        return math.ceil(total / page_size) if page_size else 0

    async def get(self, influencer_id: UUID) -> Optional[Influencer]:
        result = await self.db.execute(
            select(Influencer).where(Influencer.id == influencer_id)
        )
        return result.scalar_one_or_none()

    async def create(self, data: InfluencerCreate, created_by: UUID) -> Influencer:
        """Create one record, deriving handle and engagement rate like the importer does."""
        values = data.model_dump(exclude_none=True)

        if not values.get("handle"):
            values["handle"] = derive_handle(values.get("profile_url"), values.get("name"))

        if values.get("engagement_rate") is not None:
            values["engagement_rate"] = Decimal(format_rate(values["engagement_rate"]))
        else:
            rate = derive_engagement_rate(
                values.get("followers"),
                values.get("avg_likes"),
                values.get("avg_comments"),
                values.get("avg_shares"),
            )
            if rate is not None:
                values["engagement_rate"] = Decimal(rate)

        influencer = Influencer(created_by=created_by, **values)
        self.db.add(influencer)
        await self.db.commit()
        await self.db.refresh(influencer)

        logger.info(f"Created influencer {influencer.id} ({influencer.platform.value}/{influencer.handle})")
        return influencer

    async def update(self, influencer: Influencer, data: InfluencerUpdate) -> Influencer:
        """
        Apply a partial update. Only fields present in the payload change.

        name, platform and status cannot be cleared. Clearing handle derives
        it again; clearing engagementRate recomputes it from the counts.
        """
        changes = data.model_dump(exclude_unset=True)

        for key in ("name", "platform", "status"):
            if key in changes and changes[key] is None:
                del changes[key]

        if "engagement_rate" in changes and changes["engagement_rate"] is not None:
            changes["engagement_rate"] = Decimal(format_rate(changes["engagement_rate"]))

        for key, value in changes.items():
            setattr(influencer, key, value)

        if "handle" in changes and not influencer.handle:
            influencer.handle = derive_handle(influencer.profile_url, influencer.name)

        if "engagement_rate" in changes and changes["engagement_rate"] is None:
            rate = derive_engagement_rate(
                influencer.followers,
                influencer.avg_likes,
                influencer.avg_comments,
                influencer.avg_shares,
            )
            influencer.engagement_rate = Decimal(rate) if rate is not None else None

        influencer.updated_at = utcnow_naive()
        await self.db.commit()
        await self.db.refresh(influencer)

        logger.info(f"Updated influencer {influencer.id}: {sorted(changes)}")
        return influencer

    async def delete(self, influencer: Influencer) -> None:
        await self.db.delete(influencer)
        await self.db.commit()
        logger.info(f"Deleted influencer {influencer.id}")

    async def filter_options(self) -> dict:
        """Distinct values for the list filters."""

        async def distinct(column) -> List[str]:
            result = await self.db.execute(
                select(column).where(column.isnot(None)).distinct()
            )
            return sorted(str(v.value if hasattr(v, "value") else v) for v in result.scalars().all() if v)

        async def distinct_elements(column) -> List[str]:
            element = func.unnest(column).label("element")
            result = await self.db.execute(select(element).distinct())
            return sorted(v for v in result.scalars().all() if v)

        return {
            "platforms": await distinct(Influencer.platform),
            "countries": await distinct(Influencer.country),
            "cities": await distinct(Influencer.city),
            "categories": await distinct(Influencer.main_category),
            "collab_types": await distinct_elements(Influencer.collab_types),
            "tags": await distinct_elements(Influencer.tags),
        }

    async def dashboard_stats(self) -> dict:
        """Totals, per-platform counts, top categories and recent additions."""
        total = (await self.db.execute(select(func.count(Influencer.id)))).scalar() or 0

        platform_rows = await self.db.execute(
            select(Influencer.platform, func.count(Influencer.id))
            .group_by(Influencer.platform)
            .order_by(desc(func.count(Influencer.id)))
        )
        platform_counts = [
            {"platform": platform.value, "count": count}
            for platform, count in platform_rows.all()
        ]

        category_rows = await self.db.execute(
            select(Influencer.main_category, func.count(Influencer.id))
            .where(Influencer.main_category.isnot(None))
            .group_by(Influencer.main_category)
            .order_by(desc(func.count(Influencer.id)), asc(Influencer.main_category))
            .limit(3)
        )
        top_categories = [
            {"category": category, "count": count}
            for category, count in category_rows.all()
        ]

        recent_count = (await self.db.execute(
            select(func.count(Influencer.id))
            .where(Influencer.created_at >= days_ago_naive(settings.DASHBOARD_RECENT_DAYS))
        )).scalar() or 0

        latest, latest_total = await self.list_influencers(page=1, page_size=settings.DASHBOARD_PAGE_SIZE)

        return {
            "total_influencers": total,
            "platform_counts": platform_counts,
            "top_categories": top_categories,
            "recent_count": recent_count,
            "recent_days": settings.DASHBOARD_RECENT_DAYS,
            "latest": latest,
            "latest_total": latest_total,
        }
