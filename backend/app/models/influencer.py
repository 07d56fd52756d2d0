from sqlalchemy import Column, String, Integer, Numeric, DateTime, Text, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import relationship
import enum
import uuid
from decimal import Decimal

from app.core.database import Base
from app.utils import utcnow_naive

# Largest values the INTEGER count columns and the NUMERIC(10, 2) rate column hold
MAX_COUNT = 2147483647
MAX_RATE = Decimal("99999999.99")


class Platform(str, enum.Enum):
    instagram = "instagram"
    youtube = "youtube"
    tiktok = "tiktok"
    threads = "threads"
    other = "other"


class InfluencerStatus(str, enum.Enum):
    candidate = "candidate"
    active = "active"
    blacklist = "blacklist"


class Influencer(Base):
    __tablename__ = "influencers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Identity
    name = Column(String, nullable=False)
    platform = Column(SQLEnum(Platform, name="platform"), nullable=False, index=True)
    handle = Column(String, nullable=False, index=True)  # Not unique - re-imports create duplicates
    profile_url = Column(String)

    # Location
    country = Column(String, index=True)
    city = Column(String)
    languages = Column(ARRAY(Text))

    # Audience metrics
    followers = Column(Integer, index=True)
    avg_likes = Column(Integer)
    avg_comments = Column(Integer)
    avg_shares = Column(Integer)
    engagement_rate = Column(Numeric(10, 2))  # Percentage, e.g. 5.00

    # Classification
    main_category = Column(String, index=True)
    sub_categories = Column(ARRAY(Text))
    collab_types = Column(ARRAY(Text))
    tags = Column(ARRAY(Text))

    # Deal / contact
    base_price_text = Column(String)
    contact_email = Column(String)
    contact_dm = Column(String)
    notes_summary = Column(Text)

    status = Column(SQLEnum(InfluencerStatus, name="influencer_status"), default=InfluencerStatus.candidate, nullable=False, index=True)

    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow_naive, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive, nullable=False)

    # Relationships
    creator = relationship("User", back_populates="influencers")
    notes = relationship("InfluencerNote", back_populates="influencer", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index('ix_influencers_platform_handle', 'platform', 'handle'),
        Index('ix_influencers_engagement_rate', 'engagement_rate'),
    )


class InfluencerNote(Base):
    """Append-only free-text annotation on an influencer"""
    __tablename__ = "influencer_notes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    influencer_id = Column(UUID(as_uuid=True), ForeignKey("influencers.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)

    # Relationships
    influencer = relationship("Influencer", back_populates="notes")
    author = relationship("User", back_populates="notes")

    __table_args__ = (
        Index('ix_influencer_notes_influencer_created', 'influencer_id', 'created_at'),
    )
