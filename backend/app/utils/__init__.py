"""
Utility functions
"""
from .text_utils import split_tokens, remove_whitespace, fuzzy_key, escape_like_pattern
from .datetime import utcnow, utcnow_naive, days_ago_naive

__all__ = ["split_tokens", "remove_whitespace", "fuzzy_key", "escape_like_pattern", "utcnow", "utcnow_naive", "days_ago_naive"]
