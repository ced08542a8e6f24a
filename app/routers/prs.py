"""
PRS Router

PRS performance statement uploads, statement history and performance
royalty reporting.
"""

import logging
from datetime import date
from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.catalog import PerformanceRoyaltyResponse
from app.schemas.common import ErrorResponse
from app.schemas.prs import (
    PerformanceSummaryResponse,
    PrsStatementDetailResponse,
    PrsStatementResponse,
    PrsUploadResponse,
    TerritoryTotalsResponse,
)
from app.services.aggregation import get_performance_summary
from app.services.ingestion import ingest_prs_statement, read_csv_upload
from app.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prs"])


@router.get("/prs-statements", response_model=List[PrsStatementResponse])
async def list_statements(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[PrsStatementResponse]:
    """List PRS statements, newest first."""
    statements = await DatabaseStorage(db).list_prs_statements()
    return [PrsStatementResponse.model_validate(s) for s in statements]


@router.get("/prs-statements/{statement_id}", response_model=PrsStatementDetailResponse)
async def get_statement(
    statement_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PrsStatementDetailResponse:
    storage = DatabaseStorage(db)
    statement = await storage.get_prs_statement(statement_id)
    if statement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Statement not found")

    entries = await storage.list_performance_royalties(statement_id=statement_id)
    return PrsStatementDetailResponse(
        **PrsStatementResponse.model_validate(statement).model_dump(),
        entries=[PerformanceRoyaltyResponse.model_validate(e) for e in entries],
    )


@router.post(
    "/prs-statements/upload",
    response_model=PrsUploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload_statement(
    file: Annotated[UploadFile, File()],
    db: Annotated[AsyncSession, Depends(get_db)],
    statement_period: Annotated[Optional[str], Form(alias="statementPeriod")] = None,
    statement_date: Annotated[Optional[date], Form(alias="statementDate")] = None,
) -> PrsUploadResponse:
    """
    Upload a PRS performance royalty CSV.

    Works are created on first sight of their work number; every row with a
    work number becomes a performance entry.
    """
    content = await read_csv_upload(file)

    statement, summary = await ingest_prs_statement(
        db,
        original_name=file.filename or "statement.csv",
        content=content,
        statement_period=statement_period or None,
        statement_date=statement_date,
    )

    return PrsUploadResponse(
        success=True,
        statement_id=statement.id,
        works_processed=summary.distinct_parents,
        entries_processed=summary.records_persisted,
        total_royalties=summary.total_amount,
    )


@router.get("/performance-royalties", response_model=List[PerformanceRoyaltyResponse])
async def list_performance_royalties(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[PerformanceRoyaltyResponse]:
    royalties = await DatabaseStorage(db).list_performance_royalties()
    return [PerformanceRoyaltyResponse.model_validate(r) for r in royalties]


@router.get("/performance-royalties/summary", response_model=PerformanceSummaryResponse)
async def performance_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PerformanceSummaryResponse:
    """Totals across all statements, for the dashboard."""
    summary = await get_performance_summary(db)
    return PerformanceSummaryResponse(
        total_statements=summary.total_statements,
        total_works=summary.total_works,
        total_royalties=summary.total_royalties,
        total_performances=summary.total_performances,
        territory_breakdown={
            territory: TerritoryTotalsResponse(count=t.count, royalties=t.royalties)
            for territory, t in summary.territory_breakdown.items()
        },
        latest_statement=(
            PrsStatementResponse.model_validate(summary.latest_statement)
            if summary.latest_statement is not None
            else None
        ),
    )
