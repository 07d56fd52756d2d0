"""
Batch import: run every row through the row processor and persist outcomes.

Rows are handled strictly in file order, one at a time. Each accepted row
is committed on its own, so a failing row never undoes earlier ones and a
batch can finish partially successful. The batch record is created before
the first row and its counts are written once, after the last row.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.exceptions import PersistenceError
from app.models.import_batch import ImportBatch, ImportRowError
from app.models.influencer import Influencer
from app.services.importer.row import Row
from app.services.importer.row_processor import AcceptedRow, InfluencerCandidate, process_row

logger = logging.getLogger(__name__)


class ImportStore(Protocol):
    """Persistence operations the importer needs."""

    async def create_batch(self, file_name: str, uploaded_by: UUID, total_rows: int) -> UUID:
        ...

    async def insert_influencer(self, candidate: InfluencerCandidate) -> UUID:
        """Raises PersistenceError when the record is rejected."""
        ...

    async def insert_error(
        self,
        batch_id: UUID,
        row_index: int,
        message: str,
        raw_data: Mapping[str, Any],
    ) -> None:
        ...

    async def finalize_batch(self, batch_id: UUID, success_rows: int, error_rows: int) -> None:
        ...


class SQLAlchemyImportStore:
    """ImportStore backed by the application database, one commit per statement."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_batch(self, file_name: str, uploaded_by: UUID, total_rows: int) -> UUID:
        batch = ImportBatch(
            file_name=file_name,
            uploaded_by=uploaded_by,
            total_rows=total_rows,
            success_rows=0,
            error_rows=0,
        )
        self.db.add(batch)
        await self.db.commit()
        await self.db.refresh(batch)
        return batch.id

    async def insert_influencer(self, candidate: InfluencerCandidate) -> UUID:
        influencer = Influencer(**candidate.to_model_values())
        self.db.add(influencer)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            message = str(getattr(e, "orig", None) or e) or "Database error"
            raise PersistenceError(message, original_exception=e) from e
        return influencer.id

    async def insert_error(
        self,
        batch_id: UUID,
        row_index: int,
        message: str,
        raw_data: Mapping[str, Any],
    ) -> None:
        self.db.add(ImportRowError(
            batch_id=batch_id,
            row_index=row_index,
            error_message=message,
            raw_data=dict(raw_data),
        ))
        await self.db.commit()

    async def finalize_batch(self, batch_id: UUID, success_rows: int, error_rows: int) -> None:
        await self.db.execute(
            update(ImportBatch)
            .where(ImportBatch.id == batch_id)
            .values(success_rows=success_rows, error_rows=error_rows)
        )
        await self.db.commit()


@dataclass(frozen=True)
class RowErrorReport:
    row_index: int
    message: str
    raw_data: Dict[str, Optional[str]]


@dataclass
class ImportReport:
    batch_id: UUID
    total: int
    success: int = 0
    errors: int = 0
    error_rows: List[RowErrorReport] = field(default_factory=list)  # Capped copy for the response


class BatchImporter:
    """Runs one upload through the row pipeline against an ImportStore."""

    def __init__(self, store: ImportStore, error_response_limit: Optional[int] = None):
        self.store = store
        self.error_response_limit = (
            settings.IMPORT_ERROR_RESPONSE_LIMIT if error_response_limit is None else error_response_limit
        )

    async def _record_error(
        self,
        report: ImportReport,
        row_index: int,
        message: str,
        raw_data: Dict[str, Optional[str]],
    ) -> None:
        await self.store.insert_error(report.batch_id, row_index, message, raw_data)
        report.errors += 1
        if len(report.error_rows) < self.error_response_limit:
            report.error_rows.append(RowErrorReport(row_index=row_index, message=message, raw_data=raw_data))

    async def run(
        self,
        rows: Sequence[Row],
        mapping: Mapping[str, str],
        uploaded_by: UUID,
        file_name: str,
    ) -> ImportReport:
        """
        Import all rows of one file.

        Args:
            rows: Parsed data rows in file order
            mapping: Effective canonical field -> header mapping
            uploaded_by: ID of the importing user (also the records' creator)
            file_name: Original upload name, stored on the batch

        Returns:
            ImportReport with totals and at most `error_response_limit` error rows
            (every error is persisted regardless)
        """
        batch_id = await self.store.create_batch(file_name, uploaded_by, len(rows))
        report = ImportReport(batch_id=batch_id, total=len(rows))

        logger.info(f"Import batch {batch_id} started: {file_name} ({len(rows)} rows)")

        for row_index, row in enumerate(rows):
            outcome = process_row(row, row_index, mapping, created_by=uploaded_by)

            if not isinstance(outcome, AcceptedRow):
                logger.debug(f"Batch {batch_id} row {row_index} rejected: {outcome.message}")
                await self._record_error(report, row_index, outcome.message, outcome.raw_data)
                continue

            try:
                await self.store.insert_influencer(outcome.candidate)
            except PersistenceError as e:
                logger.warning(f"Batch {batch_id} row {row_index} not saved: {e.message}")
                await self._record_error(report, row_index, e.message or "Database error", row.to_raw())
                continue

            report.success += 1

        await self.store.finalize_batch(batch_id, report.success, report.errors)

        logger.info(
            f"Import batch {batch_id} finished: {report.success} saved, "
            f"{report.errors} errors out of {report.total}"
        )
        return report
