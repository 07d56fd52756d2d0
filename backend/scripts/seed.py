#!/usr/bin/env python3
"""
Insert demo influencers owned by the first admin.

Run create_admin.py first; the script refuses to seed without an admin.
"""
import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

from sqlalchemy import select

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.database import AsyncSessionLocal
from app.models import Influencer, InfluencerStatus, Platform, User, UserRole

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_INFLUENCERS = [
    {
        "name": "Beauty Guru",
        "platform": Platform.instagram,
        "handle": "beautyguru",
        "profile_url": "https://instagram.com/beautyguru",
        "country": "South Korea",
        "city": "Seoul",
        "languages": ["ko", "en"],
        "followers": 500000,
        "avg_likes": 25000,
        "avg_comments": 500,
        "engagement_rate": Decimal("5.10"),
        "main_category": "beauty",
        "sub_categories": ["makeup", "skincare"],
        "collab_types": ["trial", "paid_ad"],
        "base_price_text": "Starting from $5,000 per post",
        "contact_email": "contact@beautyguru.com",
        "status": InfluencerStatus.active,
        "tags": ["korean_beauty", "verified"],
        "notes_summary": "High engagement rate, responsive to DMs",
    },
    {
        "name": "Food Explorer",
        "platform": Platform.youtube,
        "handle": "foodexplorer",
        "profile_url": "https://youtube.com/@foodexplorer",
        "country": "Taiwan",
        "city": "Taipei",
        "languages": ["zh-TW", "en"],
        "followers": 1200000,
        "avg_likes": 60000,
        "avg_comments": 2000,
        "engagement_rate": Decimal("5.17"),
        "main_category": "food",
        "sub_categories": ["restaurant_reviews", "cooking"],
        "collab_types": ["trial", "group_buy", "live"],
        "base_price_text": "YouTube: $10,000, Instagram: $3,000",
        "contact_email": "hello@foodexplorer.com",
        "status": InfluencerStatus.active,
        "tags": ["taiwan_KOL", "foodie"],
        "notes_summary": "Great for restaurant partnerships",
    },
    {
        "name": "Fashionista",
        "platform": Platform.instagram,
        "handle": "fashionista",
        "profile_url": "https://instagram.com/fashionista",
        "country": "Japan",
        "city": "Tokyo",
        "languages": ["ja", "en"],
        "followers": 800000,
        "avg_likes": 40000,
        "avg_comments": 800,
        "engagement_rate": Decimal("5.10"),
        "main_category": "fashion",
        "sub_categories": ["streetwear", "luxury"],
        "collab_types": ["trial", "paid_ad"],
        "base_price_text": "Negotiable",
        "contact_dm": "@fashionista",
        "status": InfluencerStatus.candidate,
        "tags": ["japanese_fashion"],
        "notes_summary": "Interested in luxury brand collaborations",
    },
    {
        "name": "Tech Reviewer",
        "platform": Platform.youtube,
        "handle": "techreviewer",
        "profile_url": "https://youtube.com/@techreviewer",
        "country": "Singapore",
        "city": "Singapore",
        "languages": ["en", "zh-CN"],
        "followers": 2000000,
        "avg_likes": 100000,
        "avg_comments": 5000,
        "engagement_rate": Decimal("5.25"),
        "main_category": "technology",
        "sub_categories": ["gadgets", "reviews"],
        "collab_types": ["trial", "paid_ad"],
        "base_price_text": "YouTube: $15,000 per video",
        "contact_email": "business@techreviewer.com",
        "status": InfluencerStatus.active,
        "tags": ["tech_KOL", "verified"],
        "notes_summary": "High production quality, tech-savvy audience",
    },
    {
        "name": "Lifestyle Vlogger",
        "platform": Platform.tiktok,
        "handle": "lifestylevlog",
        "profile_url": "https://tiktok.com/@lifestylevlog",
        "country": "Thailand",
        "city": "Bangkok",
        "languages": ["th", "en"],
        "followers": 3000000,
        "avg_likes": 150000,
        "avg_comments": 3000,
        "engagement_rate": Decimal("5.10"),
        "main_category": "lifestyle",
        "sub_categories": ["daily_vlog", "travel"],
        "collab_types": ["trial", "paid_ad", "live"],
        "base_price_text": "TikTok: $8,000 per video",
        "contact_dm": "@lifestylevlog",
        "status": InfluencerStatus.active,
        "tags": ["thailand_KOL", "gen_z"],
        "notes_summary": "Trending content creator, high reach",
    },
]


async def seed() -> int:
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(User).where(User.role == UserRole.admin).order_by(User.created_at).limit(1)
        )
        admin = result.scalar_one_or_none()

        if not admin:
            logger.error("No admin user found. Run scripts/create_admin.py first.")
            return 1

        for values in DEMO_INFLUENCERS:
            db.add(Influencer(created_by=admin.id, **values))
        await db.commit()

        logger.info(f"Seeded {len(DEMO_INFLUENCERS)} influencers owned by {admin.display_name}")
        return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed()))
