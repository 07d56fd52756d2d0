from pydantic import BaseModel, Field, validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from app.models.influencer import MAX_COUNT, MAX_RATE, Platform, InfluencerStatus
from app.models.user import UserRole
from app.services.importer.korean_numbers import parse_korean_number, parse_decimal
from app.services.importer.platforms import normalize_platform
from app.utils import split_tokens


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# User Schemas
class UserResponse(CamelModel):
    id: UUID
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    role: UserRole


# Influencer Schemas
class InfluencerFields(CamelModel):
    """Optional influencer attributes shared by create and update payloads"""
    handle: Optional[str] = Field(None, max_length=200)
    profile_url: Optional[str] = Field(None, max_length=2000)
    country: Optional[str] = None
    city: Optional[str] = None
    languages: Optional[List[str]] = None
    followers: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    avg_likes: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    avg_comments: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    avg_shares: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    engagement_rate: Optional[Decimal] = Field(None, ge=0, le=MAX_RATE)
    main_category: Optional[str] = None
    sub_categories: Optional[List[str]] = None
    collab_types: Optional[List[str]] = None
    base_price_text: Optional[str] = None
    contact_email: Optional[str] = None
    contact_dm: Optional[str] = None
    tags: Optional[List[str]] = None
    notes_summary: Optional[str] = None

    @validator(
        'handle', 'profile_url', 'country', 'city', 'main_category', 'base_price_text',
        'contact_email', 'contact_dm', 'notes_summary',
        pre=True, check_fields=False
    )
    def blank_text_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @validator('languages', 'sub_categories', 'collab_types', 'tags', pre=True, check_fields=False)
    def split_list_text(cls, v):
        """Form inputs send lists as "a, b; c" text"""
        if isinstance(v, str):
            return split_tokens(v)
        return v

    @validator('followers', 'avg_likes', 'avg_comments', 'avg_shares', pre=True, check_fields=False)
    def parse_count_text(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return None
            parsed = parse_korean_number(v)
            if parsed is None:
                raise ValueError('must be a number')
            return parsed
        return v

    @validator('engagement_rate', pre=True, check_fields=False)
    def parse_rate_text(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return None
            parsed = parse_decimal(v)
            if parsed is None:
                raise ValueError('must be a number')
            return parsed
        return v


def _coerce_platform(v):
    if isinstance(v, str):
        platform = normalize_platform(v)
        if platform is None:
            raise ValueError(f'Invalid platform: {v}')
        return platform
    return v


class InfluencerCreate(InfluencerFields):
    name: str = Field(..., min_length=1, max_length=200)
    platform: Platform
    status: InfluencerStatus = InfluencerStatus.candidate

    @validator('name', pre=True)
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @validator('platform', pre=True)
    def normalize_platform_alias(cls, v):
        return _coerce_platform(v)


class InfluencerUpdate(InfluencerFields):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    platform: Optional[Platform] = None
    status: Optional[InfluencerStatus] = None

    @validator('name', pre=True)
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @validator('platform', pre=True)
    def normalize_platform_alias(cls, v):
        return _coerce_platform(v)


class InfluencerResponse(CamelModel):
    id: UUID
    name: str
    platform: Platform
    handle: str
    profile_url: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    languages: Optional[List[str]] = None
    followers: Optional[int] = None
    avg_likes: Optional[int] = None
    avg_comments: Optional[int] = None
    avg_shares: Optional[int] = None
    engagement_rate: Optional[Decimal] = None
    main_category: Optional[str] = None
    sub_categories: Optional[List[str]] = None
    collab_types: Optional[List[str]] = None
    base_price_text: Optional[str] = None
    contact_email: Optional[str] = None
    contact_dm: Optional[str] = None
    status: InfluencerStatus
    tags: Optional[List[str]] = None
    notes_summary: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class InfluencerListResponse(CamelModel):
    data: List[InfluencerResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class FilterOptionsResponse(CamelModel):
    platforms: List[str]
    countries: List[str]
    cities: List[str]
    categories: List[str]
    collab_types: List[str]
    tags: List[str]


# Note Schemas
class NoteCreate(BaseModel):
    content: str = Field(..., max_length=10000)


class NoteAuthor(BaseModel):
    name: Optional[str] = None


class NoteResponse(CamelModel):
    id: UUID
    content: str
    created_at: datetime
    author: NoteAuthor


# Import Schemas
class ImportErrorRow(CamelModel):
    row_index: int
    message: str
    raw_data: Dict[str, Any]


class ImportResultResponse(CamelModel):
    """Outcome of one upload. error_rows is capped; every error is persisted."""
    batch_id: UUID
    total: int
    success: int
    errors: int
    error_rows: List[ImportErrorRow]


class ImportPreviewResponse(CamelModel):
    file_name: str
    headers: List[str]
    mapping: Dict[str, str]
    unmapped_headers: List[str]
    total_rows: int
    sample_rows: List[Dict[str, Any]]


class ImportBatchResponse(CamelModel):
    id: UUID
    file_name: str
    uploaded_by: UUID
    total_rows: int
    success_rows: int
    error_rows: int
    created_at: datetime


class ImportBatchListResponse(CamelModel):
    items: List[ImportBatchResponse]
    total: int
    skip: int
    limit: int
    has_more: bool


class ImportErrorRecordResponse(CamelModel):
    id: UUID
    row_index: int
    error_message: str
    raw_data: Optional[Dict[str, Any]] = None
    created_at: datetime


class ImportErrorListResponse(CamelModel):
    items: List[ImportErrorRecordResponse]
    total: int
    skip: int
    limit: int
    has_more: bool


# Dashboard Schemas
class PlatformCount(CamelModel):
    platform: str
    count: int


class CategoryCount(CamelModel):
    category: str
    count: int


class DashboardStatsResponse(CamelModel):
    total_influencers: int
    platform_counts: List[PlatformCount]
    top_categories: List[CategoryCount]
    recent_count: int
    recent_days: int
    latest: InfluencerListResponse
