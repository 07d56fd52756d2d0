from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
import uuid

from app.core.database import Base
from app.utils import utcnow_naive


class ImportBatch(Base):
    """One spreadsheet upload and its aggregate outcome"""
    __tablename__ = "import_batches"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    file_name = Column(String, nullable=False)
    uploaded_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Counts - total is known up front, success/error are set once when the batch finishes
    total_rows = Column(Integer, nullable=False)
    success_rows = Column(Integer, default=0, nullable=False)
    error_rows = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow_naive, nullable=False, index=True)

    # Relationships
    uploader = relationship("User", back_populates="import_batches")
    errors = relationship("ImportRowError", back_populates="batch", cascade="all, delete-orphan", passive_deletes=True)


class ImportRowError(Base):
    """A row that failed validation or persistence, kept with its raw cells"""
    __tablename__ = "import_errors"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    batch_id = Column(UUID(as_uuid=True), ForeignKey("import_batches.id", ondelete="CASCADE"), nullable=False)
    row_index = Column(Integer, nullable=False)  # Zero-based, header row excluded
    error_message = Column(Text, nullable=False)
    raw_data = Column(JSONB)
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)

    # Relationships
    batch = relationship("ImportBatch", back_populates="errors")

    __table_args__ = (
        Index('ix_import_errors_batch_row', 'batch_id', 'row_index'),
    )
