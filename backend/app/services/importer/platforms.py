"""Platform name normalization (Korean and English spellings)."""
from types import MappingProxyType
from typing import Optional

from app.models.influencer import Platform


PLATFORM_ALIASES = MappingProxyType({
    # Instagram
    "인스타그램": Platform.instagram,
    "인스타": Platform.instagram,
    "Instagram": Platform.instagram,
    "instagram": Platform.instagram,
    "IG": Platform.instagram,
    "ig": Platform.instagram,
    # YouTube
    "유튜브": Platform.youtube,
    "유투브": Platform.youtube,
    "YouTube": Platform.youtube,
    "Youtube": Platform.youtube,
    "youtube": Platform.youtube,
    # TikTok
    "틱톡": Platform.tiktok,
    "티크톡": Platform.tiktok,
    "TikTok": Platform.tiktok,
    "Tiktok": Platform.tiktok,
    "tiktok": Platform.tiktok,
    # Threads
    "스레드": Platform.threads,
    "쓰레드": Platform.threads,
    "Threads": Platform.threads,
    "threads": Platform.threads,
    # Other
    "기타": Platform.other,
    "Other": Platform.other,
    "other": Platform.other,
})

CANONICAL_PLATFORMS = frozenset(platform.value for platform in Platform)


def normalize_platform(raw: Optional[str]) -> Optional[Platform]:
    """
    Map a platform cell to its canonical value.

    Lookup order: exact alias, lower-cased alias, then the lower-cased text
    itself if it is already a canonical value.

    Returns:
        Platform, or None when the text is empty or not a known platform
    """
    if raw is None:
        return None

    text = raw.strip()
    if not text:
        return None

    platform = PLATFORM_ALIASES.get(text)
    if platform is not None:
        return platform

    lowered = text.lower()
    platform = PLATFORM_ALIASES.get(lowered)
    if platform is not None:
        return platform

    if lowered in CANONICAL_PLATFORMS:
        return Platform(lowered)
    return None
