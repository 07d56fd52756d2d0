"""
Turn one spreadsheet row into a validated influencer candidate or a row error.

Processing is pure: nothing here touches the database. A row is extracted
field by field, every coercion problem is collected, and the row ends up
either accepted (with a fully populated candidate) or rejected (with all
problems joined by "; " and the raw cells kept for the operator).

Required fields: name and platform. Everything else is optional; handle
and engagementRate are derived when the sheet leaves them out.
"""
from dataclasses import dataclass, field as dataclass_field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit
from uuid import UUID

from app.models.influencer import MAX_COUNT, MAX_RATE, InfluencerStatus, Platform
from app.services.importer.columns import (
    FIELD_ATTRIBUTES,
    FIELD_HEADER_ALIASES,
    LIST_FIELDS,
    NUMERIC_FIELDS,
    TEXT_FIELDS,
)
from app.services.importer.korean_numbers import parse_decimal, parse_korean_number
from app.services.importer.platforms import normalize_platform
from app.services.importer.row import Row, extract_field
from app.utils import remove_whitespace, split_tokens

DEFAULT_HANDLE = "user"
RATE_QUANTUM = Decimal("0.01")
STATUS_VALUES = frozenset(status.value for status in InfluencerStatus)


@dataclass
class InfluencerCandidate:
    """Validated values for a new influencer record (model attribute names)."""
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
    engagement_rate: Optional[str] = None  # Two-decimal string, e.g. "5.00"
    main_category: Optional[str] = None
    sub_categories: Optional[List[str]] = None
    collab_types: Optional[List[str]] = None
    base_price_text: Optional[str] = None
    contact_email: Optional[str] = None
    contact_dm: Optional[str] = None
    status: InfluencerStatus = InfluencerStatus.candidate
    tags: Optional[List[str]] = None
    notes_summary: Optional[str] = None
    created_by: Optional[UUID] = None

    def to_model_values(self) -> Dict[str, Any]:
        values = dict(self.__dict__)
        if self.engagement_rate is not None:
            values["engagement_rate"] = Decimal(self.engagement_rate)
        return values


@dataclass(frozen=True)
class AcceptedRow:
    row_index: int
    candidate: InfluencerCandidate


@dataclass(frozen=True)
class RejectedRow:
    row_index: int
    errors: Tuple[str, ...]
    raw_data: Dict[str, Optional[str]] = dataclass_field(default_factory=dict)

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


RowOutcome = Union[AcceptedRow, RejectedRow]


# Handle lookup from a profile URL
@dataclass(frozen=True)
class ParsedHandle:
    handle: str


@dataclass(frozen=True)
class NotAUrl:
    pass


@dataclass(frozen=True)
class NoPathSegment:
    pass


HandleLookup = Union[ParsedHandle, NotAUrl, NoPathSegment]


def handle_from_profile_url(profile_url: str) -> HandleLookup:
    """
    Read the account handle from a profile URL.

    "https://instagram.com/foo_bar"       -> ParsedHandle("foo_bar")
    "https://youtube.com/@foodexplorer/"  -> ParsedHandle("foodexplorer")
    "instagram foo"                       -> NotAUrl()
    "https://instagram.com/"              -> NoPathSegment()
    """
    try:
        parts = urlsplit(profile_url.strip())
    except ValueError:
        return NotAUrl()

    if not parts.scheme or not parts.netloc:
        return NotAUrl()

    segments = [segment for segment in parts.path.split("/") if segment]
    if not segments:
        return NoPathSegment()

    handle = segments[-1].lstrip("@")
    if not handle:
        return NoPathSegment()
    return ParsedHandle(handle)


def handle_from_name(name: Optional[str]) -> str:
    return remove_whitespace(name or "").lower() or DEFAULT_HANDLE


def derive_handle(profile_url: Optional[str], name: Optional[str]) -> str:
    """Handle for a record that has none: URL path first, then the name, then "user"."""
    if profile_url:
        lookup = handle_from_profile_url(profile_url)
        if isinstance(lookup, ParsedHandle):
            return lookup.handle
    return handle_from_name(name)


def format_rate(value: Decimal) -> str:
    """Two decimals, halves up. Callers keep the value within MAX_RATE."""
    return str(value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP))


def derive_engagement_rate(
    followers: Optional[int],
    avg_likes: Optional[int],
    avg_comments: Optional[int],
    avg_shares: Optional[int],
) -> Optional[str]:
    """
    (likes + comments + shares) / followers * 100, two decimals.

    Returns None when followers is missing or zero, or when there is no
    engagement at all - an unknown rate is left unset rather than stored as 0.
    A rate beyond MAX_RATE is left unset as well.
    """
    if not followers or followers <= 0:
        return None

    total = (avg_likes or 0) + (avg_comments or 0) + (avg_shares or 0)
    if total == 0:
        return None

    rate = Decimal(total) / Decimal(followers) * 100
    if rate > MAX_RATE:
        return None
    return format_rate(rate)


def process_row(
    row: Row,
    row_index: int,
    mapping: Mapping[str, str],
    created_by: Optional[UUID] = None,
) -> RowOutcome:
    """
    Validate one row.

    Args:
        row: Parsed row (header -> cell text)
        row_index: Zero-based data row index, kept on the outcome
        mapping: canonical field -> header chosen for this file
        created_by: Importing user, set on accepted candidates

    Returns:
        AcceptedRow with the candidate, or RejectedRow with every field error
    """
    errors: List[str] = []
    values: Dict[str, Any] = {}

    def extract(field: str) -> Optional[str]:
        return extract_field(row, field, mapping.get(field), FIELD_HEADER_ALIASES[field])

    # Required fields
    name = extract("name")
    if name is None:
        errors.append("name is required")
    else:
        values["name"] = name

    raw_platform = extract("platform")
    if raw_platform is None:
        errors.append("platform is required")
    else:
        platform = normalize_platform(raw_platform)
        if platform is None:
            errors.append(f"Invalid platform: {raw_platform}")
        else:
            values["platform"] = platform

    for field in FIELD_ATTRIBUTES:
        if field in ("name", "platform"):
            continue

        text = extract(field)
        attribute = FIELD_ATTRIBUTES[field]

        if field == "status":
            if text is None:
                values[attribute] = InfluencerStatus.candidate
            elif text.strip().lower() in STATUS_VALUES:
                values[attribute] = InfluencerStatus(text.strip().lower())
            else:
                errors.append(f"Invalid status: {text}")
            continue

        if text is None:
            continue

        if field in TEXT_FIELDS:
            values[attribute] = text
        elif field in NUMERIC_FIELDS:
            count = parse_korean_number(text)
            if count is None:
                errors.append(f"{field} must be a number")
            elif count < 0:
                errors.append(f"{field} must not be negative")
            elif count > MAX_COUNT:
                errors.append(f"{field} is too large")
            else:
                values[attribute] = count
        elif field == "engagementRate":
            rate = parse_decimal(text)
            if rate is None:
                errors.append(f"{field} must be a number")
            elif rate < 0:
                errors.append(f"{field} must not be negative")
            elif rate > MAX_RATE:
                errors.append(f"{field} is too large")
            else:
                values[attribute] = format_rate(rate)
        elif field in LIST_FIELDS:
            tokens = split_tokens(text)
            if tokens:
                values[attribute] = tokens

    if errors:
        return RejectedRow(row_index=row_index, errors=tuple(errors), raw_data=row.to_raw())

    if not values.get("handle"):
        values["handle"] = derive_handle(values.get("profile_url"), values.get("name"))

    if values.get("engagement_rate") is None:
        rate = derive_engagement_rate(
            values.get("followers"),
            values.get("avg_likes"),
            values.get("avg_comments"),
            values.get("avg_shares"),
        )
        if rate is not None:
            values["engagement_rate"] = rate

    return AcceptedRow(
        row_index=row_index,
        candidate=InfluencerCandidate(created_by=created_by, **values),
    )
