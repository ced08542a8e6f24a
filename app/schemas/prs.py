"""Pydantic schemas for PRS statements and performance royalties."""

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from app.models import BatchStatus
from app.schemas.catalog import PerformanceRoyaltyResponse
from app.schemas.common import ApiModel, Money


class PrsStatementResponse(ApiModel):
    id: UUID
    filename: str
    original_name: str
    statement_period: Optional[str] = None
    statement_date: Optional[date] = None
    total_royalties: Money
    currency: str
    work_count: int
    status: BatchStatus
    error_message: Optional[str] = None
    uploaded_at: datetime


class PrsStatementDetailResponse(PrsStatementResponse):
    """Statement with its performance entries."""
    entries: List[PerformanceRoyaltyResponse] = []


class PrsUploadResponse(ApiModel):
    success: bool = True
    statement_id: UUID
    works_processed: int
    entries_processed: int
    total_royalties: Money


class TerritoryTotalsResponse(ApiModel):
    count: int
    royalties: Money


class PerformanceSummaryResponse(ApiModel):
    """Dashboard totals across all statements."""
    total_statements: int
    total_works: int
    total_royalties: Money
    total_performances: int
    territory_breakdown: Dict[str, TerritoryTotalsResponse]
    latest_statement: Optional[PrsStatementResponse] = None
