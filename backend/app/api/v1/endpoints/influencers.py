"""
Influencer endpoints: filtered listing, CSV export, CRUD and notes.

Reads are open to any signed-in user; creating, editing and deleting
records requires an admin. Notes can be added by anyone signed in.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
import logging

from app.core.database import get_db
from app.core.config import settings
from app.exceptions import BusinessLogicError
from app.models.user import User
from app.models.schemas import (
    InfluencerCreate,
    InfluencerUpdate,
    InfluencerResponse,
    InfluencerListResponse,
    FilterOptionsResponse,
    NoteCreate,
    NoteResponse,
)
from app.api.deps import get_current_user, require_admin
from app.services.influencer_service import (
    InfluencerService,
    InfluencerFilters,
    parse_platform_list,
    parse_status_list,
    parse_text_list,
)
from app.services.export_service import influencers_to_csv, export_file_name
from app.services import note_service

logger = logging.getLogger(__name__)

router = APIRouter()


def get_influencer_filters(
    search: Optional[str] = Query(None, description="Matches name, handle, notes summary and tags"),
    platforms: Optional[str] = Query(None, description="Comma separated platforms"),
    countries: Optional[str] = Query(None),
    cities: Optional[str] = Query(None),
    main_categories: Optional[str] = Query(None, alias="mainCategories"),
    status_filter: Optional[str] = Query(None, alias="status", description="Comma separated statuses"),
    followers_min: Optional[int] = Query(None, alias="followersMin", ge=0),
    followers_max: Optional[int] = Query(None, alias="followersMax", ge=0),
    avg_likes_min: Optional[int] = Query(None, alias="avgLikesMin", ge=0),
    avg_likes_max: Optional[int] = Query(None, alias="avgLikesMax", ge=0),
    engagement_rate_min: Optional[Decimal] = Query(None, alias="engagementRateMin", ge=0),
    engagement_rate_max: Optional[Decimal] = Query(None, alias="engagementRateMax", ge=0),
    collab_types: Optional[str] = Query(None, alias="collabTypes"),
    tags: Optional[str] = Query(None),
) -> InfluencerFilters:
    try:
        return InfluencerFilters(
            search=search,
            platforms=parse_platform_list(platforms),
            countries=parse_text_list(countries),
            cities=parse_text_list(cities),
            main_categories=parse_text_list(main_categories),
            statuses=parse_status_list(status_filter),
            followers_min=followers_min,
            followers_max=followers_max,
            avg_likes_min=avg_likes_min,
            avg_likes_max=avg_likes_max,
            engagement_rate_min=engagement_rate_min,
            engagement_rate_max=engagement_rate_max,
            collab_types=parse_text_list(collab_types),
            tags=parse_text_list(tags),
        )
    except BusinessLogicError as e:
        raise HTTPException(status_code=400, detail=e.message)


async def get_influencer_or_404(
    influencer_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    influencer = await InfluencerService(db).get(influencer_id)
    if not influencer:
        raise HTTPException(status_code=404, detail="Influencer not found")
    return influencer


@router.get("", response_model=InfluencerListResponse)
async def list_influencers(
    filters: InfluencerFilters = Depends(get_influencer_filters),
    sort_field: str = Query("created_at", alias="sortField"),
    sort_direction: str = Query("desc", alias="sortDirection"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List influencers matching every given filter.

    Sortable by followers, engagement_rate or created_at (default newest first).
    """
    service = InfluencerService(db)
    try:
        influencers, total = await service.list_influencers(
            filters=filters,
            sort_field=sort_field,
            sort_direction=sort_direction,
            page=page,
            page_size=page_size,
        )
    except BusinessLogicError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return InfluencerListResponse(
        data=[InfluencerResponse.model_validate(influencer) for influencer in influencers],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=InfluencerService.total_pages(total, page_size),
    )


@router.get("/options", response_model=FilterOptionsResponse)
async def get_filter_options(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Distinct values for the list filter dropdowns."""
    options = await InfluencerService(db).filter_options()
    return FilterOptionsResponse(**options)


@router.get("/export")
async def export_influencers(
    filters: InfluencerFilters = Depends(get_influencer_filters),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Download the filtered records as CSV, newest first.
    Capped at EXPORT_MAX_ROWS records.
    """
    influencers, total = await InfluencerService(db).list_influencers(
        filters=filters,
        page=1,
        page_size=settings.EXPORT_MAX_ROWS,
    )

    if total > len(influencers):
        logger.warning(f"Export truncated to {len(influencers)} of {total} influencers")

    return Response(
        content=influencers_to_csv(influencers),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_file_name()}"'}
    )


@router.post("", response_model=InfluencerResponse, status_code=status.HTTP_201_CREATED)
async def create_influencer(
    payload: InfluencerCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a single influencer record (admin only)."""
    influencer = await InfluencerService(db).create(payload, created_by=current_user.id)
    return InfluencerResponse.model_validate(influencer)


@router.get("/{influencer_id}", response_model=InfluencerResponse)
async def get_influencer(
    influencer=Depends(get_influencer_or_404),
    current_user: User = Depends(get_current_user),
):
    return InfluencerResponse.model_validate(influencer)


@router.patch("/{influencer_id}", response_model=InfluencerResponse)
async def update_influencer(
    payload: InfluencerUpdate,
    influencer=Depends(get_influencer_or_404),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update an influencer (admin only).

    Only fields present in the body change; send engagementRate: null to
    recompute it from the counts.
    """
    influencer = await InfluencerService(db).update(influencer, payload)
    return InfluencerResponse.model_validate(influencer)


@router.delete("/{influencer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_influencer(
    influencer=Depends(get_influencer_or_404),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete an influencer and its notes (admin only)."""
    await InfluencerService(db).delete(influencer)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{influencer_id}/notes", response_model=List[NoteResponse])
async def list_influencer_notes(
    influencer=Depends(get_influencer_or_404),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Notes on an influencer, newest first."""
    notes = await note_service.list_notes(db, influencer.id)
    return [note_service.to_note_response(note) for note in notes]


@router.post("/{influencer_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def add_influencer_note(
    payload: NoteCreate,
    influencer=Depends(get_influencer_or_404),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a note as the current user."""
    try:
        note = await note_service.add_note(db, influencer.id, current_user, payload.content)
    except BusinessLogicError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return note_service.to_note_response(note, author=current_user)
