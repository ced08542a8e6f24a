"""
Imports Router

Handles distributor CSV uploads and the uploaded-file history.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models import FileType
from app.schemas.common import ErrorResponse
from app.schemas.imports import UploadedFileResponse, UploadedFileSummary, UploadResponse
from app.services.ingestion import ingest_distributor_file, read_csv_upload
from app.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["imports"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload_file(
    file: Annotated[UploadFile, File()],
    db: Annotated[AsyncSession, Depends(get_db)],
    file_type: Annotated[str, Form(alias="fileType")] = FileType.DISTRIBUTOR.value,
) -> UploadResponse:
    """
    Upload a distributor royalty CSV.

    The file is recorded as processing, parsed, and its line items stored.
    Malformed files and missing required columns are rejected with 400 and
    the file is marked failed.
    """
    try:
        FileType(file_type)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type: {file_type}",
        )

    content = await read_csv_upload(file)

    uploaded, summary = await ingest_distributor_file(
        db,
        original_name=file.filename or "upload.csv",
        content=content,
        file_type=file_type,
    )

    return UploadResponse(
        success=True,
        file=UploadedFileSummary(
            id=uploaded.id,
            filename=uploaded.original_name,
            record_count=summary.records_persisted,
            tracks_created=summary.distinct_parents,
        ),
        message=f"Successfully processed {summary.records_persisted} royalty records",
    )


@router.get("/files", response_model=List[UploadedFileResponse])
async def list_files(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[UploadedFileResponse]:
    """List uploaded files, newest first."""
    files = await DatabaseStorage(db).list_uploaded_files()
    return [UploadedFileResponse.model_validate(f) for f in files]
