"""TrackIntegration model: a track matched on an external catalog (Spotify)."""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, String, DateTime, Numeric, Integer, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.track import Track


class TrackIntegration(Base):
    """External catalog match for a track, one per provider."""

    __tablename__ = "track_integrations"
    __table_args__ = (
        UniqueConstraint("track_id", "provider", name="uq_track_integration_provider"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    track_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tracks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider: Mapped[str] = mapped_column(String(50), nullable=False)

    provider_id: Mapped[str] = mapped_column(String(100), nullable=False)
    provider_uri: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Metadata as reported by the provider
    matched_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    matched_artists: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    matched_album: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    album_art: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    preview_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Match quality
    match_confidence: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=5, scale=2),
        nullable=True,
    )
    match_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # isrc, name_artist

    popularity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    provider_isrc: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    track: Mapped["Track"] = relationship("Track", back_populates="integrations")

    def __repr__(self) -> str:
        return f"<TrackIntegration {self.id} track={self.track_id} provider={self.provider}>"
