"""
Clerk session token verification.

Clerk is only the identity provider: roles live on the local users table,
so this module stops at returning verified claims.
"""

import logging
import jwt
import httpx
from typing import Optional, Dict, Any
from fastapi import HTTPException, status, Header
from functools import lru_cache

from app.core.config import settings
from app.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def clerk_issuer() -> str:
    return f"https://{settings.CLERK_FRONTEND_API}"


@lru_cache(maxsize=1)
def get_clerk_jwks() -> Dict[str, Any]:
    """
    Fetch the Clerk key set once per process.

    Raises:
        ConfigurationError: If the Clerk frontend API host is not configured
        HTTPException: 503 if Clerk cannot be reached
    """
    if not settings.CLERK_FRONTEND_API:
        raise ConfigurationError("CLERK_FRONTEND_API not configured", "CLERK_FRONTEND_API")

    url = f"{clerk_issuer()}/.well-known/jwks.json"
    try:
        response = httpx.get(url, timeout=settings.CLERK_JWKS_TIMEOUT_SECONDS)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch Clerk JWKS from {url}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication provider unavailable"
        )
    return response.json()


def find_signing_key(jwks: Dict[str, Any], kid: str) -> Optional[Dict[str, Any]]:
    return next((key for key in jwks.get("keys", []) if key.get("kid") == kid), None)


def resolve_signing_key(kid: str) -> Dict[str, Any]:
    """Look the key up in the cached set, refetching once for rotated keys."""
    key = find_signing_key(get_clerk_jwks(), kid)
    if key is None:
        logger.info(f"Signing key {kid} not in cached JWKS, refetching")
        get_clerk_jwks.cache_clear()
        key = find_signing_key(get_clerk_jwks(), kid)
    if key is None:
        raise _unauthorized("Unable to find matching key in JWKS")
    return key


def verify_clerk_token(token: str) -> Dict[str, Any]:
    """
    Verify signature, expiry and issuer of a Clerk session token.

    Returns:
        The decoded claims; ``sub`` is the Clerk user id
    """
    try:
        kid = jwt.get_unverified_header(token).get("kid")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e}")
    if not kid:
        raise _unauthorized("Token missing key ID")

    public_key = jwt.algorithms.RSAAlgorithm.from_jwk(resolve_signing_key(kid))

    try:
        # Clerk session tokens carry no audience
        return jwt.decode(
            token,
            public_key,
            algorithms=["RS256"],
            issuer=clerk_issuer() if settings.CLERK_VERIFY_ISSUER else None,
            leeway=settings.CLERK_JWT_LEEWAY_SECONDS,
            options={
                "verify_aud": False,
                "verify_iss": settings.CLERK_VERIFY_ISSUER,
            }
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidIssuerError:
        raise _unauthorized("Token was not issued by the configured Clerk instance")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e}")


async def get_current_user_from_clerk(
    authorization: Optional[str] = Header(None)
) -> Dict[str, Any]:
    """FastAPI dependency returning the verified claims of the bearer token."""
    if not authorization:
        raise _unauthorized("Authorization header missing")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip() or " " in token.strip():
        raise _unauthorized("Invalid authorization header format. Expected: Bearer <token>")

    return verify_clerk_token(token.strip())
