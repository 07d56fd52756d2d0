"""
Tests for bearer token parsing and signing key lookup
"""
import pytest
from fastapi import HTTPException

from app.core.clerk_auth import (
    clerk_issuer,
    find_signing_key,
    get_current_user_from_clerk,
    verify_clerk_token,
)


class TestHeaderParsing:
    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(HTTPException) as exc:
            await get_current_user_from_clerk(None)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Authorization header missing"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer ", "Bearer a b"])
    async def test_malformed_header(self, header):
        with pytest.raises(HTTPException) as exc:
            await get_current_user_from_clerk(header)
        assert exc.value.status_code == 401
        assert "Expected: Bearer <token>" in exc.value.detail


class TestVerification:
    def test_garbage_token_is_rejected_before_key_lookup(self):
        with pytest.raises(HTTPException) as exc:
            verify_clerk_token("not-a-jwt")
        assert exc.value.status_code == 401
        assert exc.value.detail.startswith("Invalid token")

    def test_find_signing_key(self):
        jwks = {"keys": [{"kid": "a", "n": "1"}, {"kid": "b", "n": "2"}]}
        assert find_signing_key(jwks, "b") == {"kid": "b", "n": "2"}
        assert find_signing_key(jwks, "c") is None
        assert find_signing_key({}, "a") is None

    def test_issuer_uses_frontend_api_host(self):
        assert clerk_issuer() == "https://test.clerk.accounts.dev"
