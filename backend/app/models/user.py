from sqlalchemy import Column, String, DateTime, Boolean, Enum as SQLEnum, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum
import uuid

from app.core.database import Base
from app.utils import utcnow_naive


class UserRole(str, enum.Enum):
    admin = "admin"
    staff = "staff"


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    clerk_user_id = Column(String, unique=True, index=True, nullable=False)  # Primary identifier for Clerk users
    email = Column(String, unique=True, index=True, nullable=True)  # Optional - can be fetched from Clerk if needed
    username = Column(String, unique=True, index=True, nullable=True)  # Optional - generated from Clerk ID if not provided
    name = Column(String, nullable=True)  # Display name shown on notes
    role = Column(SQLEnum(UserRole, name="user_role"), default=UserRole.staff, nullable=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    influencers = relationship("Influencer", back_populates="creator")
    notes = relationship("InfluencerNote", back_populates="author")
    import_batches = relationship("ImportBatch", back_populates="uploader")

    __table_args__ = (
        Index('idx_users_role', 'role'),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email or self.clerk_user_id
