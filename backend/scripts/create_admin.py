#!/usr/bin/env python3
"""
Promote a user to admin (or demote back to staff).

Users appear in the database the first time they sign in through Clerk.
If the user has not signed in yet, pass --create with their Clerk user ID
to create the record up front.

Usage:
    python scripts/create_admin.py user_2abc...          # by Clerk ID
    python scripts/create_admin.py ops@example.com       # by email
    python scripts/create_admin.py user_2abc... --create --email ops@example.com --name Ops
    python scripts/create_admin.py ops@example.com --staff
"""
import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.database import AsyncSessionLocal
from app.models.user import UserRole
from app.services.user_service import find_user, get_or_create_user_from_clerk, set_user_role

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def promote(identifier: str, role: UserRole, create: bool, email: str = None, name: str = None) -> int:
    async with AsyncSessionLocal() as db:
        user = await find_user(db, identifier)

        if not user and create:
            user = await get_or_create_user_from_clerk(db, clerk_user_id=identifier, email=email, name=name)

        if not user:
            logger.error(f"No user matches '{identifier}'. Sign in once or use --create with a Clerk user ID.")
            return 1

        user = await set_user_role(db, user, role)
        logger.info(f"{user.display_name} ({user.clerk_user_id}) is now {user.role.value}")
        return 0


def main():
    parser = argparse.ArgumentParser(description='Grant or revoke the admin role')
    parser.add_argument('identifier', help='Clerk user ID, email or username')
    parser.add_argument('--staff', action='store_true', help='Demote to staff instead of promoting')
    parser.add_argument('--create', action='store_true', help='Create the user if missing (identifier must be a Clerk user ID)')
    parser.add_argument('--email', default=None, help='Email for a newly created user')
    parser.add_argument('--name', default=None, help='Display name for a newly created user')
    args = parser.parse_args()

    role = UserRole.staff if args.staff else UserRole.admin
    sys.exit(asyncio.run(promote(args.identifier, role, args.create, args.email, args.name)))


if __name__ == "__main__":
    main()
