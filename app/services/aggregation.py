"""
Reporting aggregates.

Statistics are recomputed from line items on every call; nothing here is
cached or stored. Sums are Decimal; a parent with no line items reports
zeros.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import PerformanceRoyalty, PrsStatement, RoyaltyEntry, Track, Work

logger = logging.getLogger(__name__)


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


@dataclass
class TrackStats:
    """A track with its earnings aggregates."""
    track: Track
    total_earnings: Decimal = Decimal("0")
    total_streams: int = 0
    store_count: int = 0
    country_count: int = 0


@dataclass
class WorkStats:
    """A work with its performance aggregates."""
    work: Work
    total_royalties: Decimal = Decimal("0")
    total_performances: int = 0
    territories_count: int = 0
    productions_count: int = 0


@dataclass
class TerritoryTotals:
    count: int = 0
    royalties: Decimal = Decimal("0")


@dataclass
class PerformanceSummary:
    """Dashboard totals across all PRS statements."""
    total_statements: int = 0
    total_works: int = 0
    total_royalties: Decimal = Decimal("0")
    total_performances: int = 0
    territory_breakdown: Dict[str, TerritoryTotals] = field(default_factory=dict)
    latest_statement: Optional[PrsStatement] = None


# ---------------------------------------------------------------------------
# Tracks
# ---------------------------------------------------------------------------

def _track_stats_query() -> Select:
    total_earnings = func.coalesce(func.sum(RoyaltyEntry.earnings), 0)
    return (
        select(
            Track,
            total_earnings.label("total_earnings"),
            func.coalesce(func.sum(RoyaltyEntry.quantity), 0).label("total_streams"),
            func.count(func.distinct(RoyaltyEntry.store)).label("store_count"),
            func.count(func.distinct(RoyaltyEntry.country_of_sale)).label("country_count"),
        )
        .outerjoin(RoyaltyEntry, RoyaltyEntry.track_id == Track.id)
        .group_by(Track.id)
        .order_by(total_earnings.desc(), Track.title)
    )


def _to_track_stats(row) -> TrackStats:
    return TrackStats(
        track=row.Track,
        total_earnings=_decimal(row.total_earnings),
        total_streams=int(row.total_streams or 0),
        store_count=int(row.store_count or 0),
        country_count=int(row.country_count or 0),
    )


async def list_tracks_with_stats(db: AsyncSession) -> List[TrackStats]:
    """All tracks with aggregates, highest earnings first."""
    result = await db.execute(_track_stats_query())
    return [_to_track_stats(row) for row in result.all()]


async def get_track_with_stats(db: AsyncSession, track_id: UUID) -> Optional[TrackStats]:
    result = await db.execute(_track_stats_query().where(Track.id == track_id))
    row = result.first()
    return _to_track_stats(row) if row is not None else None


# ---------------------------------------------------------------------------
# Works
# ---------------------------------------------------------------------------

def _work_stats_query() -> Select:
    total_royalties = func.coalesce(func.sum(PerformanceRoyalty.royalty_amount), 0)
    return (
        select(
            Work,
            total_royalties.label("total_royalties"),
            func.coalesce(func.sum(PerformanceRoyalty.performances), 0).label("total_performances"),
            func.count(func.distinct(PerformanceRoyalty.usage_territory)).label("territories_count"),
            func.count(func.distinct(PerformanceRoyalty.production)).label("productions_count"),
        )
        .outerjoin(PerformanceRoyalty, PerformanceRoyalty.work_id == Work.id)
        .group_by(Work.id)
        .order_by(total_royalties.desc(), Work.title)
    )


def _to_work_stats(row) -> WorkStats:
    return WorkStats(
        work=row.Work,
        total_royalties=_decimal(row.total_royalties),
        total_performances=int(row.total_performances or 0),
        territories_count=int(row.territories_count or 0),
        productions_count=int(row.productions_count or 0),
    )


async def list_works_with_stats(db: AsyncSession) -> List[WorkStats]:
    """All works with aggregates, highest royalties first."""
    result = await db.execute(_work_stats_query())
    return [_to_work_stats(row) for row in result.all()]


async def get_work_with_stats(db: AsyncSession, work_id: UUID) -> Optional[WorkStats]:
    result = await db.execute(_work_stats_query().where(Work.id == work_id))
    row = result.first()
    return _to_work_stats(row) if row is not None else None


# ---------------------------------------------------------------------------
# Performance summary
# ---------------------------------------------------------------------------

async def get_performance_summary(db: AsyncSession) -> PerformanceSummary:
    """
    Totals across all statements.

    The territory breakdown counts performances per usage territory; entries
    without a territory are grouped under "Unknown".
    """
    summary = PerformanceSummary()

    summary.total_statements = (
        await db.execute(select(func.count(PrsStatement.id)))
    ).scalar_one()
    summary.total_works = (await db.execute(select(func.count(Work.id)))).scalar_one()

    totals = (
        await db.execute(
            select(
                func.coalesce(func.sum(PerformanceRoyalty.royalty_amount), 0),
                func.coalesce(func.sum(PerformanceRoyalty.performances), 0),
            )
        )
    ).one()
    summary.total_royalties = _decimal(totals[0])
    summary.total_performances = int(totals[1] or 0)

    territory = func.coalesce(PerformanceRoyalty.usage_territory, "Unknown")
    breakdown = await db.execute(
        select(
            territory.label("territory"),
            func.coalesce(func.sum(PerformanceRoyalty.performances), 0).label("count"),
            func.coalesce(func.sum(PerformanceRoyalty.royalty_amount), 0).label("royalties"),
        )
        .group_by(territory)
        .order_by(territory)
    )
    for row in breakdown.all():
        summary.territory_breakdown[row.territory] = TerritoryTotals(
            count=int(row.count or 0),
            royalties=_decimal(row.royalties),
        )

    latest = await db.execute(
        select(PrsStatement).order_by(PrsStatement.uploaded_at.desc()).limit(1)
    )
    summary.latest_statement = latest.scalar_one_or_none()

    return summary
