"""
Import orchestration and batch history.

An upload is parsed and its mapping resolved before anything is written,
so a request-level failure never leaves a batch behind.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, desc, asc
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.import_batch import ImportBatch, ImportRowError
from app.services.importer import (
    BatchImporter,
    ImportReport,
    ImportStore,
    ParsedSheet,
    auto_map_columns,
    merge_mappings,
    parse_mapping_json,
    parse_upload,
)

logger = logging.getLogger(__name__)


def resolve_mapping(sheet: ParsedSheet, mapping_json: Optional[str]) -> Dict[str, str]:
    """Auto-map the sheet's headers, then let the caller's mapping override."""
    return merge_mappings(auto_map_columns(sheet.headers), parse_mapping_json(mapping_json))


async def run_import(
    store: ImportStore,
    content: bytes,
    filename: str,
    uploaded_by: UUID,
    mapping_json: Optional[str] = None,
) -> ImportReport:
    """
    Parse an upload and import every row.

    Raises:
        ImportFileError: Before any batch is created, if the file or mapping is unusable
    """
    sheet = parse_upload(content, filename)
    mapping = resolve_mapping(sheet, mapping_json)
    logger.debug(f"Effective mapping for {filename}: {mapping}")

    importer = BatchImporter(store)
    return await importer.run(sheet.rows, mapping, uploaded_by=uploaded_by, file_name=sheet.file_name)


def preview_import(content: bytes, filename: str) -> Dict[str, Any]:
    """Headers, suggested mapping and the first rows of an upload. Nothing is stored."""
    sheet = parse_upload(content, filename)
    mapping = auto_map_columns(sheet.headers)
    mapped_headers = set(mapping.values())

    return {
        "file_name": sheet.file_name,
        "headers": sheet.headers,
        "mapping": mapping,
        "unmapped_headers": [header for header in sheet.headers if header not in mapped_headers],
        "total_rows": sheet.total_rows,
        "sample_rows": [row.to_raw() for row in sheet.rows[:settings.IMPORT_PREVIEW_ROWS]],
    }


async def list_batches(db: AsyncSession, skip: int = 0, limit: int = 20) -> Tuple[List[ImportBatch], int]:
    total = (await db.execute(select(func.count(ImportBatch.id)))).scalar() or 0
    result = await db.execute(
        select(ImportBatch)
        .order_by(desc(ImportBatch.created_at))
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_batch(db: AsyncSession, batch_id: UUID) -> Optional[ImportBatch]:
    result = await db.execute(select(ImportBatch).where(ImportBatch.id == batch_id))
    return result.scalar_one_or_none()


async def list_batch_errors(
    db: AsyncSession,
    batch_id: UUID,
    skip: int = 0,
    limit: int = 50
) -> Tuple[List[ImportRowError], int]:
    """Persisted row errors of one batch, in row order."""
    total = (await db.execute(
        select(func.count(ImportRowError.id)).where(ImportRowError.batch_id == batch_id)
    )).scalar() or 0
    result = await db.execute(
        select(ImportRowError)
        .where(ImportRowError.batch_id == batch_id)
        .order_by(asc(ImportRowError.row_index))
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total
