"""
Catalog Router

Tracks and works with their aggregated earnings, plus raw line items.
"""

import logging
from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.catalog import (
    PerformanceRoyaltyResponse,
    RoyaltyEntryResponse,
    TrackResponse,
    TrackWithStatsResponse,
    WorkDetailResponse,
    WorkResponse,
    WorkWithStatsResponse,
)
from app.services.aggregation import (
    TrackStats,
    WorkStats,
    get_track_with_stats,
    get_work_with_stats,
    list_tracks_with_stats,
    list_works_with_stats,
)
from app.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


def track_stats_response(stats: TrackStats) -> TrackWithStatsResponse:
    return TrackWithStatsResponse(
        **TrackResponse.model_validate(stats.track).model_dump(),
        total_earnings=stats.total_earnings,
        total_streams=stats.total_streams,
        store_count=stats.store_count,
        country_count=stats.country_count,
    )


def work_stats_fields(stats: WorkStats) -> dict:
    return {
        **WorkResponse.model_validate(stats.work).model_dump(),
        "total_royalties": stats.total_royalties,
        "total_performances": stats.total_performances,
        "territories_count": stats.territories_count,
        "productions_count": stats.productions_count,
    }


# --- Tracks ---

@router.get("/tracks", response_model=List[TrackWithStatsResponse])
async def list_tracks(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[TrackWithStatsResponse]:
    """All tracks with earnings aggregates, highest earnings first."""
    return [track_stats_response(s) for s in await list_tracks_with_stats(db)]


@router.get("/tracks/{track_id}", response_model=TrackWithStatsResponse)
async def get_track(
    track_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TrackWithStatsResponse:
    stats = await get_track_with_stats(db, track_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")
    return track_stats_response(stats)


@router.get("/tracks/{track_id}/royalties", response_model=List[RoyaltyEntryResponse])
async def get_track_royalties(
    track_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[RoyaltyEntryResponse]:
    entries = await DatabaseStorage(db).list_royalty_entries(track_id=track_id)
    return [RoyaltyEntryResponse.model_validate(e) for e in entries]


@router.get("/royalties", response_model=List[RoyaltyEntryResponse])
async def list_royalties(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[RoyaltyEntryResponse]:
    entries = await DatabaseStorage(db).list_royalty_entries()
    return [RoyaltyEntryResponse.model_validate(e) for e in entries]


# --- Works ---

@router.get("/works", response_model=List[WorkWithStatsResponse])
async def list_works(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[WorkWithStatsResponse]:
    """All works with performance aggregates, highest royalties first."""
    return [WorkWithStatsResponse(**work_stats_fields(s)) for s in await list_works_with_stats(db)]


@router.get("/works/{work_id}", response_model=WorkDetailResponse)
async def get_work(
    work_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkDetailResponse:
    """A work with its aggregates and performance entries."""
    stats = await get_work_with_stats(db, work_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work not found")

    royalties = await DatabaseStorage(db).list_performance_royalties(work_id=work_id)
    return WorkDetailResponse(
        **work_stats_fields(stats),
        royalties=[PerformanceRoyaltyResponse.model_validate(r) for r in royalties],
    )
