#!/usr/bin/env python3
"""Check database connectivity and print row counts"""

import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import select, func, text
from sqlalchemy.exc import SQLAlchemyError

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.database import AsyncSessionLocal
from app.models import User, Influencer, InfluencerNote, ImportBatch, ImportRowError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TABLES = [User, Influencer, InfluencerNote, ImportBatch, ImportRowError]


async def check_db() -> int:
    try:
        async with AsyncSessionLocal() as db:
            version = (await db.execute(text("SELECT version()"))).scalar()
            logger.info(f"Connected: {version}")

            for model in TABLES:
                count = (await db.execute(select(func.count()).select_from(model))).scalar()
                print(f"{model.__tablename__:<20} {count}")

            result = await db.execute(
                select(ImportBatch).order_by(ImportBatch.created_at.desc()).limit(5)
            )
            batches = result.scalars().all()
            if batches:
                print("\nRecent imports:")
                for batch in batches:
                    print(
                        f"  {batch.created_at:%Y-%m-%d %H:%M} {batch.file_name}: "
                        f"{batch.success_rows}/{batch.total_rows} ok, {batch.error_rows} errors"
                    )
    except SQLAlchemyError as e:
        logger.error(f"Database check failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check_db()))
