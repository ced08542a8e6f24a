"""Pydantic schemas for Spotify matching."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.catalog import TrackResponse
from app.schemas.common import ApiModel, Money


class SpotifyStatusResponse(ApiModel):
    connected: bool


class TrackIntegrationResponse(ApiModel):
    """A stored match between a track and a provider entry."""
    id: UUID
    track_id: UUID
    provider: str
    provider_id: str
    provider_uri: Optional[str] = None
    matched_name: Optional[str] = None
    matched_artists: Optional[List[str]] = None
    matched_album: Optional[str] = None
    album_art: Optional[str] = None
    preview_url: Optional[str] = None
    match_confidence: Optional[Money] = None
    match_method: Optional[str] = None
    popularity: Optional[int] = None
    duration_ms: Optional[int] = None
    provider_isrc: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TrackSpotifyStatus(TrackResponse):
    """Track with its Spotify match state."""
    spotify_matched: bool = False
    spotify_id: Optional[str] = None
    album_art: Optional[str] = None


class MatchResponse(ApiModel):
    success: bool
    already_matched: bool = False
    integration: Optional[TrackIntegrationResponse] = None
    message: Optional[str] = None


class BatchMatchRequest(ApiModel):
    track_ids: List[UUID] = Field(min_length=1)


class BatchMatchDetail(ApiModel):
    track_id: str
    status: str
    spotify_id: Optional[str] = None


class BatchMatchResponse(ApiModel):
    matched: int
    failed: int
    skipped: int
    details: List[BatchMatchDetail]
