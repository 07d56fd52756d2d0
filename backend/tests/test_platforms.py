"""
Tests for platform alias normalization
"""
import pytest

from app.models.influencer import Platform
from app.services.importer.platforms import normalize_platform


class TestNormalizePlatform:

    def test_korean_and_english_spellings_agree(self):
        assert normalize_platform("인스타그램") == Platform.instagram
        assert normalize_platform("instagram") == Platform.instagram
        assert normalize_platform("Instagram") == Platform.instagram
        assert normalize_platform("인스타") == Platform.instagram

    @pytest.mark.parametrize("text,expected", [
        ("유튜브", Platform.youtube),
        ("YouTube", Platform.youtube),
        ("YOUTUBE", Platform.youtube),
        ("틱톡", Platform.tiktok),
        ("TikTok", Platform.tiktok),
        ("스레드", Platform.threads),
        ("기타", Platform.other),
        ("  threads  ", Platform.threads),
    ])
    def test_aliases(self, text, expected):
        assert normalize_platform(text) == expected

    def test_canonical_value_in_any_case(self):
        assert normalize_platform("OTHER") == Platform.other

    def test_unknown_platform_is_invalid(self):
        assert normalize_platform("unknown_platform") is None
        assert normalize_platform("facebook") is None

    def test_blank_is_invalid(self):
        assert normalize_platform("") is None
        assert normalize_platform("   ") is None
        assert normalize_platform(None) is None
