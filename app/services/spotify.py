"""
Spotify API client for matching catalog tracks.

Uses the Spotify Web API with the client credentials flow.
https://developer.spotify.com/documentation/web-api

The access token lives on the client's SpotifyCredentials, not in module
state. Expiry is checked before every request and a new token is fetched
by an explicit refresh().
"""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request

from app.core.config import settings
from app.services.matching import name_artist_confidence

logger = logging.getLogger(__name__)


class SpotifyError(Exception):
    """Spotify could not be reached or refused the credentials."""


@dataclass
class SpotifyCredentials:
    """Client credentials plus the current access token."""
    client_id: str
    client_secret: str
    access_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """True when a token is held and has more than a minute left."""
        if not self.access_token or not self.expires_at:
            return False
        now = now or datetime.utcnow()
        return now < self.expires_at - timedelta(minutes=1)

    def invalidate(self) -> None:
        self.access_token = None
        self.expires_at = None

    @property
    def basic_auth(self) -> str:
        encoded = base64.b64encode(f"{self.client_id}:{self.client_secret}".encode()).decode()
        return f"Basic {encoded}"


@dataclass
class SpotifyTrackMatch:
    """A Spotify track proposed for a catalog track."""
    spotify_id: str
    spotify_uri: Optional[str]
    name: str
    artists: List[str] = field(default_factory=list)
    album: Optional[str] = None
    album_art: Optional[str] = None
    preview_url: Optional[str] = None
    popularity: Optional[int] = None
    duration_ms: Optional[int] = None
    isrc: Optional[str] = None
    match_method: str = "isrc"
    confidence: float = 100.0


def _track_from_item(item: Dict[str, Any]) -> SpotifyTrackMatch:
    album = item.get("album") or {}
    images = album.get("images") or []
    return SpotifyTrackMatch(
        spotify_id=item.get("id"),
        spotify_uri=item.get("uri"),
        name=item.get("name"),
        artists=[a.get("name") for a in item.get("artists", [])],
        album=album.get("name"),
        album_art=images[0]["url"] if images else None,
        preview_url=item.get("preview_url"),
        popularity=item.get("popularity"),
        duration_ms=item.get("duration_ms"),
        isrc=(item.get("external_ids") or {}).get("isrc"),
    )


class SpotifyService:
    """
    Service for interacting with Spotify API.

    Handles authentication and searches tracks by ISRC or by title and
    artist.
    """

    BASE_URL = "https://api.spotify.com/v1"
    AUTH_URL = "https://accounts.spotify.com/api/token"

    # Below this, a title/artist search result is not accepted
    MIN_NAME_CONFIDENCE = 60.0

    def __init__(
        self,
        credentials: SpotifyCredentials,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.credentials = credentials
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    async def refresh(self) -> str:
        """
        Fetch a new access token.

        Raises:
            SpotifyError: credentials missing or rejected
        """
        if not self.credentials.configured:
            raise SpotifyError("Spotify credentials not configured")

        async with self._client() as client:
            response = await client.post(
                self.AUTH_URL,
                headers={
                    "Authorization": self.credentials.basic_auth,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data={"grant_type": "client_credentials"},
            )

        if response.status_code != 200:
            logger.error(f"Failed to get Spotify token: {response.text}")
            raise SpotifyError("Failed to authenticate with Spotify")

        data = response.json()
        expires_in = data.get("expires_in", 3600)
        self.credentials.access_token = data["access_token"]
        self.credentials.expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
        return self.credentials.access_token

    async def _access_token(self) -> str:
        if self.credentials.is_valid():
            return self.credentials.access_token
        return await self.refresh()

    async def _request(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """Make an authenticated request to Spotify API."""
        token = await self._access_token()

        async with self._client() as client:
            response = await client.get(
                f"{self.BASE_URL}{endpoint}",
                headers={"Authorization": f"Bearer {token}"},
                params=params,
            )

            if response.status_code == 401:
                # Token revoked early, refresh once and retry
                self.credentials.invalidate()
                token = await self.refresh()
                response = await client.get(
                    f"{self.BASE_URL}{endpoint}",
                    headers={"Authorization": f"Bearer {token}"},
                    params=params,
                )

        if response.status_code != 200:
            logger.warning(f"Spotify API error: {response.status_code} - {response.text}")
            return {}

        return response.json()

    async def check_connection(self) -> bool:
        """True when a token can be obtained with the configured credentials."""
        try:
            await self._access_token()
        except (SpotifyError, httpx.HTTPError) as e:
            logger.info(f"Spotify not connected: {e}")
            return False
        return True

    async def search_track_by_isrc(self, isrc: str) -> Optional[SpotifyTrackMatch]:
        """Search for a track by ISRC code."""
        result = await self._request("/search", {
            "q": f"isrc:{isrc}",
            "type": "track",
            "limit": 1,
        })

        items = result.get("tracks", {}).get("items", [])
        if not items:
            return None

        match = _track_from_item(items[0])
        match.match_method = "isrc"
        match.confidence = 100.0
        return match

    async def search_track_by_name_artist(self, title: str, artist: str) -> Optional[SpotifyTrackMatch]:
        """
        Search by title and artist, keeping the best-scoring candidate.

        Returns None when nothing scores at least MIN_NAME_CONFIDENCE.
        """
        result = await self._request("/search", {
            "q": f"track:{title} artist:{artist}",
            "type": "track",
            "limit": 5,
        })

        best: Optional[SpotifyTrackMatch] = None
        for item in result.get("tracks", {}).get("items", []):
            candidate = _track_from_item(item)
            candidate.match_method = "name_artist"
            candidate.confidence = name_artist_confidence(title, artist, candidate.name, candidate.artists)
            if best is None or candidate.confidence > best.confidence:
                best = candidate

        if best is None or best.confidence < self.MIN_NAME_CONFIDENCE:
            return None
        return best

    async def match_track(self, isrc: str, title: str, artist: str) -> Optional[SpotifyTrackMatch]:
        """Match by ISRC first, then by title and artist."""
        match = await self.search_track_by_isrc(isrc)

        if match is None and title and artist:
            match = await self.search_track_by_name_artist(title, artist)

        return match


def build_spotify_service() -> SpotifyService:
    """Service configured from the application settings."""
    return SpotifyService(
        SpotifyCredentials(
            client_id=settings.SPOTIFY_CLIENT_ID,
            client_secret=settings.SPOTIFY_CLIENT_SECRET,
        )
    )


def get_spotify_service(request: Request) -> SpotifyService:
    """
    FastAPI dependency returning the client owned by the running app.

    The client (and its token) lives on `app.state`; it is built at startup
    and on first use when the app runs without a lifespan.
    """
    service = getattr(request.app.state, "spotify_service", None)
    if service is None:
        service = build_spotify_service()
        request.app.state.spotify_service = service
    return service
