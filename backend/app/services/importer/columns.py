"""
Canonical import fields and spreadsheet header matching.

Canonical field names are the external (camelCase) names used in mapping
payloads and error messages. Each one maps to a snake_case attribute on
the Influencer model.

All tables here are read-only module constants, built once at import.
"""
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from app.exceptions import ImportFileError
from app.utils import fuzzy_key, remove_whitespace

logger = logging.getLogger(__name__)


# canonical field -> model attribute
FIELD_ATTRIBUTES = MappingProxyType({
    "name": "name",
    "platform": "platform",
    "handle": "handle",
    "profileUrl": "profile_url",
    "country": "country",
    "city": "city",
    "languages": "languages",
    "followers": "followers",
    "avgLikes": "avg_likes",
    "avgComments": "avg_comments",
    "avgShares": "avg_shares",
    "engagementRate": "engagement_rate",
    "mainCategory": "main_category",
    "subCategories": "sub_categories",
    "collabTypes": "collab_types",
    "basePriceText": "base_price_text",
    "contactEmail": "contact_email",
    "contactDm": "contact_dm",
    "status": "status",
    "tags": "tags",
    "notesSummary": "notes_summary",
})

CANONICAL_FIELDS: Tuple[str, ...] = tuple(FIELD_ATTRIBUTES)

TEXT_FIELDS = frozenset({
    "name", "handle", "profileUrl", "country", "city", "mainCategory",
    "basePriceText", "contactEmail", "contactDm", "notesSummary",
})
NUMERIC_FIELDS = ("followers", "avgLikes", "avgComments", "avgShares")
LIST_FIELDS = frozenset({"languages", "subCategories", "collabTypes", "tags"})


# Header spellings seen in operator spreadsheets, most common first.
# Also used as the per-field fallback list when reading a row.
FIELD_HEADER_ALIASES = MappingProxyType({
    "name": ("이름", "성명", "인플루언서명", "인플루언서", "채널명", "name", "Name", "influencer name"),
    "platform": ("플랫폼", "채널", "SNS", "platform", "Platform"),
    "handle": ("핸들", "아이디", "계정", "계정명", "handle", "Handle", "username", "account"),
    "profileUrl": ("프로필URL", "프로필 URL", "프로필url", "프로필링크", "프로필 링크", "링크", "URL",
                   "profileUrl", "profile url", "profile_url", "link"),
    "country": ("국가", "나라", "country", "Country"),
    "city": ("도시", "지역", "city", "City"),
    "languages": ("언어", "사용언어", "languages", "language"),
    "followers": ("팔로워", "팔로워수", "팔로워 수", "구독자", "구독자수", "followers", "Followers",
                  "follower count", "subscribers"),
    "avgLikes": ("평균좋아요", "평균 좋아요", "좋아요", "avgLikes", "avg likes", "average likes", "likes"),
    "avgComments": ("평균댓글", "평균 댓글", "댓글", "avgComments", "avg comments", "average comments", "comments"),
    "avgShares": ("평균공유수", "평균 공유수", "평균공유", "공유수", "공유", "avgShares", "avg shares",
                  "average shares", "shares"),
    "engagementRate": ("참여율", "인게이지먼트", "인게이지먼트율", "engagementRate", "engagement rate",
                       "engagement", "ER"),
    "mainCategory": ("카테고리", "메인카테고리", "주카테고리", "분야", "mainCategory", "main category", "category"),
    "subCategories": ("서브카테고리", "세부카테고리", "하위카테고리", "subCategories", "sub categories"),
    "collabTypes": ("협업유형", "협업 유형", "협업형태", "collabTypes", "collab types", "collaboration"),
    "basePriceText": ("단가", "가격", "비용", "basePriceText", "base price", "price"),
    "contactEmail": ("연락처", "이메일", "contactEmail", "contact email", "email"),
    "contactDm": ("DM", "디엠", "contactDm", "contact dm"),
    "status": ("상태", "status", "Status"),
    "tags": ("태그", "해시태그", "tags", "Tags"),
    "notesSummary": ("메모", "비고", "노트", "notesSummary", "notes", "memo"),
})

# (header, field) pairs in priority order
HEADER_DICTIONARY: Tuple[Tuple[str, str], ...] = tuple(
    (header, field)
    for field, headers in FIELD_HEADER_ALIASES.items()
    for header in headers
)

# Header row of the downloadable template, in column order
TEMPLATE_HEADERS: Tuple[Tuple[str, str], ...] = (
    ("name", "이름"),
    ("platform", "플랫폼"),
    ("profileUrl", "프로필URL"),
    ("country", "국가"),
    ("followers", "팔로워"),
    ("avgLikes", "평균좋아요"),
    ("avgComments", "평균댓글"),
    ("avgShares", "평균공유수"),
    ("engagementRate", "참여율"),
    ("mainCategory", "카테고리"),
    ("collabTypes", "협업유형"),
    ("basePriceText", "단가"),
    ("contactEmail", "연락처"),
    ("notesSummary", "메모"),
)

# "avglikes" -> "avgLikes"; accepts both camelCase and snake_case keys
_FIELD_KEYS = MappingProxyType({
    **{fuzzy_key(attribute).replace("_", ""): field for field, attribute in FIELD_ATTRIBUTES.items()},
    **{fuzzy_key(field): field for field in CANONICAL_FIELDS},
})


def canonical_field(key: str) -> Optional[str]:
    """Resolve a mapping key ("avgLikes", "avg_likes") to its canonical field."""
    if key in FIELD_ATTRIBUTES:
        return key
    return _FIELD_KEYS.get(fuzzy_key(key).replace("_", ""))


def match_header(header: str) -> Optional[str]:
    """
    Find the canonical field for one spreadsheet header.

    Rules are tried in order, each over the whole dictionary:
    exact match, match with all whitespace removed, case-insensitive match.
    """
    for header_key, field in HEADER_DICTIONARY:
        if header == header_key:
            return field

    compact = remove_whitespace(header)
    for header_key, field in HEADER_DICTIONARY:
        if compact == remove_whitespace(header_key):
            return field

    folded = compact.casefold()
    for header_key, field in HEADER_DICTIONARY:
        if folded == remove_whitespace(header_key).casefold():
            return field

    return None


def auto_map_columns(headers: Iterable[str]) -> Dict[str, str]:
    """
    Build a canonical field -> header mapping from a file's header row.

    The mapped value is the header exactly as it appears in the file so row
    lookups hit. When several headers resolve to one field the first wins.
    Headers matching nothing are left out.
    """
    mapping: Dict[str, str] = {}
    for header in headers:
        if not isinstance(header, str):
            continue
        field = match_header(header)
        if field is None or field in mapping:
            continue
        mapping[field] = header
    return mapping


def normalize_mapping(raw_mapping: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Validate a caller-supplied mapping payload.

    Raises:
        ImportFileError: If a key is not a canonical field or a header is not text
    """
    if not raw_mapping:
        return {}

    mapping: Dict[str, str] = {}
    for key, header in raw_mapping.items():
        field = canonical_field(str(key))
        if field is None:
            raise ImportFileError(f"Unknown field in mapping: {key}")
        if header is None or header == "":
            continue
        if not isinstance(header, str):
            raise ImportFileError(f"Mapping for {field} must be a column name")
        mapping[field] = header
    return mapping


def parse_mapping_json(payload: Optional[str]) -> Dict[str, str]:
    """
    Decode the `mapping` form field of an upload (a JSON object, possibly empty).

    Raises:
        ImportFileError: If the text is not a JSON object or names an unknown field
    """
    if payload is None or not payload.strip():
        return {}
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ImportFileError("Mapping must be valid JSON", details={"error": str(e)}) from e
    if not isinstance(decoded, dict):
        raise ImportFileError("Mapping must be a JSON object")
    return normalize_mapping(decoded)


def merge_mappings(auto_mapping: Mapping[str, str], supplied_mapping: Mapping[str, str]) -> Dict[str, str]:
    """Combine mappings; the caller's choice wins for a field both define."""
    merged = dict(auto_mapping)
    for field, header in supplied_mapping.items():
        if field in merged and merged[field] != header:
            logger.debug(f"Mapping override for {field}: {merged[field]!r} -> {header!r}")
        merged[field] = header
    return merged
