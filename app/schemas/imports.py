"""Pydantic schemas for distributor uploads."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models import BatchStatus
from app.schemas.common import ApiModel


class UploadedFileResponse(ApiModel):
    """An uploaded distributor file."""
    id: UUID
    filename: str
    original_name: str
    file_type: str
    file_size: Optional[int] = None
    record_count: int
    status: BatchStatus
    error_message: Optional[str] = None
    uploaded_at: datetime


class UploadedFileSummary(ApiModel):
    """File part of the upload response."""
    id: UUID
    filename: str
    record_count: int = Field(description="Number of line items persisted")
    tracks_created: int = Field(description="Number of distinct tracks referenced by the file")


class UploadResponse(ApiModel):
    """Response schema for the upload endpoint."""
    success: bool = True
    file: UploadedFileSummary
    message: str
