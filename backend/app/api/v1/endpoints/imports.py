"""
Spreadsheet import endpoints (admin only).

POST /imports runs an upload through the import pipeline and reports
per-row outcomes; a bad row never fails the request, a bad file does.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID
import logging

from app.core.database import get_db
from app.core.config import settings
from app.core.rate_limit import limiter
from app.exceptions import ImportFileError
from app.models.user import User
from app.models.schemas import (
    ImportResultResponse,
    ImportErrorRow,
    ImportPreviewResponse,
    ImportBatchResponse,
    ImportBatchListResponse,
    ImportErrorRecordResponse,
    ImportErrorListResponse,
)
from app.api.deps import require_admin, get_import_store
from app.services.importer import ImportStore
from app.services import import_service
from app.services.export_service import build_import_template, XLSX_MEDIA_TYPE, TEMPLATE_FILE_NAME

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ImportResultResponse)
@limiter.limit(f"{settings.IMPORT_RATE_LIMIT_PER_MINUTE}/minute")
async def import_influencers(
    request: Request,
    file: UploadFile = File(..., description="CSV or Excel file"),
    mapping: Optional[str] = Form(None, description="JSON object: canonical field -> column header"),
    current_user: User = Depends(require_admin),
    store: ImportStore = Depends(get_import_store)
):
    """
    Import influencers from a CSV/XLSX upload.

    Returns total/success/error counts and the first IMPORT_ERROR_RESPONSE_LIMIT
    row errors; every row error is stored on the batch.
    """
    content = await file.read()
    filename = file.filename or ""

    logger.info(f"User {current_user.id} uploading {filename} ({len(content)} bytes)")

    try:
        report = await import_service.run_import(
            store,
            content,
            filename,
            uploaded_by=current_user.id,
            mapping_json=mapping,
        )
    except ImportFileError as e:
        logger.info(f"Rejected upload {filename}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)

    return ImportResultResponse(
        batch_id=report.batch_id,
        total=report.total,
        success=report.success,
        errors=report.errors,
        error_rows=[
            ImportErrorRow(row_index=error.row_index, message=error.message, raw_data=error.raw_data)
            for error in report.error_rows
        ],
    )


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    file: UploadFile = File(...),
    current_user: User = Depends(require_admin)
):
    """Show headers, the suggested column mapping and sample rows without importing."""
    content = await file.read()
    try:
        preview = import_service.preview_import(content, file.filename or "")
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return ImportPreviewResponse(**preview)


@router.get("/template")
async def download_template(current_user: User = Depends(require_admin)):
    """Empty XLSX with the Korean column headers the importer recognizes."""
    return Response(
        content=build_import_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILE_NAME}"'}
    )


@router.get("", response_model=ImportBatchListResponse)
async def list_import_batches(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Import history, latest first."""
    batches, total = await import_service.list_batches(db, skip=skip, limit=limit)
    return ImportBatchListResponse(
        items=[ImportBatchResponse.model_validate(batch) for batch in batches],
        total=total,
        skip=skip,
        limit=limit,
        has_more=skip + len(batches) < total,
    )


@router.get("/{batch_id}", response_model=ImportBatchResponse)
async def get_import_batch(
    batch_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    batch = await import_service.get_batch(db, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Import batch not found")
    return ImportBatchResponse.model_validate(batch)


@router.get("/{batch_id}/errors", response_model=ImportErrorListResponse)
async def list_import_errors(
    batch_id: UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.IMPORT_ERROR_RESPONSE_LIMIT, ge=1, le=500),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Every stored row error of a batch, by row index."""
    batch = await import_service.get_batch(db, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Import batch not found")

    errors, total = await import_service.list_batch_errors(db, batch_id, skip=skip, limit=limit)
    return ImportErrorListResponse(
        items=[ImportErrorRecordResponse.model_validate(error) for error in errors],
        total=total,
        skip=skip,
        limit=limit,
        has_more=skip + len(errors) < total,
    )
