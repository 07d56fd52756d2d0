"""
User service for managing users with Clerk integration and roles.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


async def get_or_create_user_from_clerk(
    db: AsyncSession,
    clerk_user_id: str,
    email: Optional[str] = None,
    username: Optional[str] = None,
    name: Optional[str] = None
) -> User:
    """
    Get or create a user from Clerk authentication data.
    Uses Clerk ID as the primary identifier - email and username are optional.
    New users always start as staff; admins are promoted explicitly.

    Args:
        db: Database session
        clerk_user_id: Clerk user ID from the JWT token (required)
        email: Optional user email address
        username: Optional username (will be generated from Clerk ID if not provided)
        name: Optional display name

    Returns:
        User object
    """
    result = await db.execute(
        select(User).where(User.clerk_user_id == clerk_user_id)
    )
    user = result.scalar_one_or_none()

    if user:
        # Update email if provided and changed
        if email and user.email != email:
            user.email = email
            await db.commit()
            await db.refresh(user)
        return user

    if not username:
        # Generate username from Clerk ID (use last 8 chars for brevity)
        username = f"user_{clerk_user_id[-8:]}"

        # Check if username exists and make it unique if needed
        username_base = username
        counter = 1
        while True:
            result = await db.execute(
                select(User).where(User.username == username)
            )
            if not result.scalar_one_or_none():
                break
            username = f"{username_base}{counter}"
            counter += 1

    user = User(
        clerk_user_id=clerk_user_id,
        email=email,
        username=username,
        name=name,
        role=UserRole.staff,
        is_active=True,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Created user {user.id} for Clerk ID {clerk_user_id}")
    return user


async def get_user_by_clerk_id(
    db: AsyncSession,
    clerk_user_id: str
) -> Optional[User]:
    """
    Get a user by their Clerk user ID.

    Returns:
        User object or None if not found
    """
    result = await db.execute(
        select(User).where(User.clerk_user_id == clerk_user_id)
    )
    return result.scalar_one_or_none()


async def find_user(db: AsyncSession, identifier: str) -> Optional[User]:
    """Look a user up by Clerk ID, email or username."""
    result = await db.execute(
        select(User).where(
            or_(
                User.clerk_user_id == identifier,
                User.email == identifier,
                User.username == identifier,
            )
        )
    )
    return result.scalars().first()


async def set_user_role(db: AsyncSession, user: User, role: UserRole) -> User:
    """Change a user's role and persist it."""
    if user.role != role:
        logger.info(f"Changing role of user {user.id}: {user.role.value} -> {role.value}")
        user.role = role
        await db.commit()
        await db.refresh(user)
    return user
