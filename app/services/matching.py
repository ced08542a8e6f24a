"""
Track matching against external catalogs.

Stores one TrackIntegration per (track, provider). A track already matched
on a provider is never re-matched until its integration is deleted.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from rapidfuzz import fuzz
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Track, TrackIntegration

if TYPE_CHECKING:
    from app.services.spotify import SpotifyService, SpotifyTrackMatch

logger = logging.getLogger(__name__)

SPOTIFY = "spotify"


@dataclass
class BatchMatchResult:
    """Result of matching several tracks."""
    matched: int = 0
    failed: int = 0
    skipped: int = 0
    details: List[Dict] = field(default_factory=list)


def normalize_text(text: str) -> str:
    """
    Normalize text for fuzzy matching.

    - lowercase
    - remove accents
    - replace & with "and"
    - remove (...) and [...]
    - normalize "feat.", "ft.", "featuring" -> "feat"
    - remove punctuation, collapse spaces
    """
    if not text:
        return ""

    text = text.lower()

    # Remove accents
    text = unicodedata.normalize('NFD', text)
    text = ''.join(c for c in text if unicodedata.category(c) != 'Mn')

    text = text.replace('&', ' and ')

    # Remove parenthetical content (...) and [...]
    text = re.sub(r'\([^)]*\)', '', text)
    text = re.sub(r'\[[^\]]*\]', '', text)

    text = re.sub(r'\bfeat\.?\b', 'feat', text)
    text = re.sub(r'\bft\.?\b', 'feat', text)
    text = re.sub(r'\bfeaturing\b', 'feat', text)

    text = re.sub(r'[^\w\s]', ' ', text)
    return re.sub(r'\s+', ' ', text).strip()


def name_artist_confidence(
    title: str,
    artist: str,
    candidate_title: str,
    candidate_artists: Sequence[str],
) -> float:
    """
    Score a title/artist search result from 0 to 100.

    Title similarity weighs 60%, the best artist similarity 40%.
    """
    title_score = fuzz.ratio(normalize_text(title), normalize_text(candidate_title or ""))

    normalized_artist = normalize_text(artist)
    artist_score = 0.0
    for name in candidate_artists:
        score = fuzz.ratio(normalized_artist, normalize_text(name or ""))
        # Catalog artist fields often list collaborators together
        if ' and ' in normalized_artist or ' feat ' in normalized_artist:
            score = max(score, fuzz.partial_ratio(normalized_artist, normalize_text(name or "")))
        artist_score = max(artist_score, score)

    return round(title_score * 0.6 + artist_score * 0.4, 2)


async def get_integration(
    db: AsyncSession,
    track_id: UUID,
    provider: str = SPOTIFY,
) -> Optional[TrackIntegration]:
    result = await db.execute(
        select(TrackIntegration).where(
            TrackIntegration.track_id == track_id,
            TrackIntegration.provider == provider,
        )
    )
    return result.scalar_one_or_none()


async def list_tracks_with_match_status(
    db: AsyncSession,
    provider: str = SPOTIFY,
) -> List[Tuple[Track, Optional[TrackIntegration]]]:
    """Every track with its integration for `provider`, newest tracks first."""
    result = await db.execute(
        select(Track, TrackIntegration)
        .outerjoin(
            TrackIntegration,
            and_(TrackIntegration.track_id == Track.id, TrackIntegration.provider == provider),
        )
        .order_by(Track.created_at.desc())
    )
    return [(track, integration) for track, integration in result.all()]


def _integration_from_match(track: Track, match: "SpotifyTrackMatch") -> TrackIntegration:
    return TrackIntegration(
        track_id=track.id,
        provider=SPOTIFY,
        provider_id=match.spotify_id,
        provider_uri=match.spotify_uri,
        matched_name=match.name,
        matched_artists=list(match.artists),
        matched_album=match.album,
        album_art=match.album_art,
        preview_url=match.preview_url,
        match_confidence=Decimal(str(match.confidence)),
        match_method=match.match_method,
        popularity=match.popularity,
        duration_ms=match.duration_ms,
        provider_isrc=match.isrc,
    )


async def match_track(
    db: AsyncSession,
    track: Track,
    service: "SpotifyService",
) -> Tuple[Optional[TrackIntegration], bool]:
    """
    Match one track on Spotify and store the integration.

    Returns:
        (integration, already_matched). integration is None when Spotify
        has no acceptable match.
    """
    existing = await get_integration(db, track.id)
    if existing is not None:
        return existing, True

    match = await service.match_track(track.isrc, track.title, track.artist)
    if match is None:
        logger.info(f"No Spotify match for {track.isrc} ({track.title})")
        return None, False

    integration = _integration_from_match(track, match)
    db.add(integration)
    await db.commit()
    await db.refresh(integration)

    logger.info(
        f"Matched {track.isrc} to Spotify {match.spotify_id} "
        f"via {match.match_method} ({match.confidence})"
    )
    return integration, False


async def match_tracks(
    db: AsyncSession,
    track_ids: Sequence[UUID],
    service: "SpotifyService",
) -> BatchMatchResult:
    """Match several tracks, skipping those already matched."""
    results = BatchMatchResult()

    for track_id in track_ids:
        existing = await get_integration(db, track_id)
        if existing is not None:
            results.skipped += 1
            results.details.append({"trackId": str(track_id), "status": "skipped", "spotifyId": existing.provider_id})
            continue

        track = await db.get(Track, track_id)
        if track is None:
            results.failed += 1
            results.details.append({"trackId": str(track_id), "status": "not_found"})
            continue

        try:
            integration, _ = await match_track(db, track, service)
        except Exception:
            logger.exception(f"Spotify match failed for track {track_id}")
            await db.rollback()
            results.failed += 1
            results.details.append({"trackId": str(track_id), "status": "error"})
            continue

        if integration is None:
            results.failed += 1
            results.details.append({"trackId": str(track_id), "status": "no_match"})
            continue

        results.matched += 1
        results.details.append({"trackId": str(track_id), "status": "matched", "spotifyId": integration.provider_id})

    return results


async def delete_integration(db: AsyncSession, integration: TrackIntegration) -> None:
    await db.delete(integration)
    await db.commit()
