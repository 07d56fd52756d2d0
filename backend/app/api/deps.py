"""
FastAPI dependencies for authentication, authorization and database access.

Authentication Strategy:
- Clerk issues the JWT; only its `sub` claim identifies the user
- Email, username and name claims are optional metadata
- The role (admin | staff) lives on the local users table; first-time
  users are created as staff
"""
import logging
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.clerk_auth import get_current_user_from_clerk
from app.services.user_service import get_or_create_user_from_clerk
from app.services.importer import ImportStore, SQLAlchemyImportStore
from app.models.user import User

logger = logging.getLogger(__name__)


async def get_current_user(
    request: Request,
    clerk_claims: dict = Depends(get_current_user_from_clerk),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the current authenticated user from the database.
    Creates the user if this is their first login.

    Raises:
        HTTPException: 401 if the token has no subject or the user is disabled
    """
    clerk_user_id = clerk_claims.get("sub")

    if not clerk_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user ID"
        )

    user = await get_or_create_user_from_clerk(
        db=db,
        clerk_user_id=clerk_user_id,
        email=clerk_claims.get("email"),
        username=clerk_claims.get("username"),
        name=clerk_claims.get("name"),
    )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled"
        )

    # Rate limiter keys on this
    request.state.user = user
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Dependency for endpoints that modify influencer records or run imports.

    Raises:
        HTTPException 403: If the user is not an admin
    """
    if not current_user.is_admin:
        logger.info(f"User {current_user.id} denied admin-only access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


async def get_import_store(db: AsyncSession = Depends(get_db)) -> ImportStore:
    return SQLAlchemyImportStore(db)
