"""
Text processing utilities
"""
import re
from typing import List


# Separators accepted inside list cells ("ko, en; ja")
LIST_SEPARATOR_PATTERN = re.compile(r'[,;]')


def split_tokens(text: str) -> List[str]:
    """
    Split a list-valued cell into tokens.

    Args:
        text: Cell text using comma and/or semicolon separators
              (e.g., "trial; paid_ad, live")

    Returns:
        Trimmed, non-empty tokens in their original order. Duplicates are kept.
        Example: ["trial", "paid_ad", "live"]
    """
    if not text:
        return []

    tokens = (token.strip() for token in LIST_SEPARATOR_PATTERN.split(text))
    return [token for token in tokens if token]


def remove_whitespace(text: str) -> str:
    """Remove every whitespace character ("프로필 URL" -> "프로필URL")."""
    return re.sub(r'\s+', '', text)


def fuzzy_key(text: str) -> str:
    """
    Key used for fuzzy header comparison: trimmed, internal whitespace
    removed, lower-cased.

    Example:
        fuzzy_key(" Avg Likes ") -> "avglikes"
    """
    return remove_whitespace(text.strip()).lower()


def escape_like_pattern(pattern: str) -> str:
    """
    Escape special LIKE/ILIKE pattern characters so user search text is
    matched literally.

    PostgreSQL LIKE patterns use:
    - % to match any sequence of characters
    - _ to match any single character
    - \\ as escape character

    Example:
        escape_like_pattern("test%") -> "test\\%"
        escape_like_pattern("a_b") -> "a\\_b"
    """
    return pattern.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
