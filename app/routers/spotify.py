"""
Spotify Router

Endpoints for matching catalog tracks with Spotify.
"""

import logging
from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.spotify import (
    BatchMatchRequest,
    BatchMatchResponse,
    MatchResponse,
    SpotifyStatusResponse,
    TrackIntegrationResponse,
    TrackSpotifyStatus,
)
from app.schemas.catalog import TrackResponse
from app.services import matching
from app.services.spotify import SpotifyError, SpotifyService, get_spotify_service
from app.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spotify", tags=["spotify"])
tracks_router = APIRouter(prefix="/tracks", tags=["spotify"])


@router.get("/status", response_model=SpotifyStatusResponse)
async def spotify_status(
    service: Annotated[SpotifyService, Depends(get_spotify_service)],
) -> SpotifyStatusResponse:
    """Whether Spotify credentials are configured and accepted."""
    return SpotifyStatusResponse(connected=await service.check_connection())


@router.get("/tracks", response_model=List[TrackSpotifyStatus])
async def tracks_with_spotify_status(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[TrackSpotifyStatus]:
    """All tracks with their Spotify match state, newest first."""
    rows = await matching.list_tracks_with_match_status(db)
    return [
        TrackSpotifyStatus(
            **TrackResponse.model_validate(track).model_dump(),
            spotify_matched=integration is not None,
            spotify_id=integration.provider_id if integration else None,
            album_art=integration.album_art if integration else None,
        )
        for track, integration in rows
    ]


@router.post("/match/{track_id}", response_model=MatchResponse)
async def match_track(
    track_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[SpotifyService, Depends(get_spotify_service)],
) -> MatchResponse:
    """Match one track, by ISRC first and then by title and artist."""
    track = await DatabaseStorage(db).get_track(track_id)
    if track is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")

    try:
        integration, already_matched = await matching.match_track(db, track, service)
    except SpotifyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    if integration is None:
        return MatchResponse(success=False, message="No match found on Spotify")

    return MatchResponse(
        success=True,
        already_matched=already_matched,
        integration=TrackIntegrationResponse.model_validate(integration),
    )


@router.post("/match-batch", response_model=BatchMatchResponse)
async def match_batch(
    request: BatchMatchRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[SpotifyService, Depends(get_spotify_service)],
) -> BatchMatchResponse:
    """Match several tracks; tracks already matched are skipped."""
    result = await matching.match_tracks(db, request.track_ids, service)
    return BatchMatchResponse(
        matched=result.matched,
        failed=result.failed,
        skipped=result.skipped,
        details=result.details,
    )


@tracks_router.get("/{track_id}/spotify", response_model=TrackIntegrationResponse)
async def get_track_spotify(
    track_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TrackIntegrationResponse:
    integration = await matching.get_integration(db, track_id)
    if integration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No Spotify match found")
    return TrackIntegrationResponse.model_validate(integration)


@tracks_router.delete("/{track_id}/spotify")
async def delete_track_spotify(
    track_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Remove a Spotify match so the track can be matched again."""
    integration = await matching.get_integration(db, track_id)
    if integration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No Spotify match found")
    await matching.delete_integration(db, integration)
    return {"success": True}
