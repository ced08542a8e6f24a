"""Pydantic schemas for tracks, royalty entries and works."""

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from app.schemas.common import ApiModel, Money


class TrackResponse(ApiModel):
    id: UUID
    isrc: str
    title: str
    artist: str
    upc: Optional[str] = None
    created_at: datetime


class TrackWithStatsResponse(TrackResponse):
    """Track with earnings aggregates."""
    total_earnings: Money
    total_streams: int
    store_count: int
    country_count: int


class RoyaltyEntryResponse(ApiModel):
    """One distributor line item."""
    id: UUID
    track_id: UUID
    uploaded_file_id: UUID
    date_inserted: Optional[date] = None
    reporting_date: Optional[date] = None
    sale_month: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    store: str
    country_of_sale: Optional[str] = None
    song_or_album: Optional[str] = None
    release_title: Optional[str] = None
    quantity: int
    team_percentage: Optional[Money] = None
    songwriter_royalties_withheld: Money
    earnings: Money
    net_earnings: Optional[Money] = None
    commission: Optional[str] = None
    splits_percent: Optional[str] = None
    commission_type: Optional[str] = None
    recoup: Money
    currency: str
    extras: Optional[Dict[str, str]] = None
    created_at: datetime


class WorkResponse(ApiModel):
    id: UUID
    work_no: str
    title: str
    ip1: Optional[str] = None
    ip2: Optional[str] = None
    ip3: Optional[str] = None
    ip4: Optional[str] = None
    your_share_percent: Optional[Money] = None
    track_id: Optional[UUID] = None
    created_at: datetime


class WorkWithStatsResponse(WorkResponse):
    """Work with performance aggregates."""
    total_royalties: Money
    total_performances: int
    territories_count: int
    productions_count: int


class PerformanceRoyaltyResponse(ApiModel):
    """One PRS performance entry."""
    id: UUID
    work_id: UUID
    prs_statement_id: UUID
    usage_territory: Optional[str] = None
    broadcast_region: Optional[str] = None
    period: Optional[str] = None
    duration_seconds: Optional[int] = None
    production: Optional[str] = None
    performances: int
    royalty_amount: Money
    currency: str
    extras: Optional[Dict[str, str]] = None
    created_at: datetime


class WorkDetailResponse(WorkWithStatsResponse):
    royalties: List[PerformanceRoyaltyResponse] = []
