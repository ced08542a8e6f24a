import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Text, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.royalty_entry import RoyaltyEntry
    from app.models.track_integration import TrackIntegration


class Track(Base):
    """A canonical recording, unique by ISRC."""

    __tablename__ = "tracks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    isrc: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    artist: Mapped[str] = mapped_column(Text, nullable=False)
    upc: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    royalty_entries: Mapped[list["RoyaltyEntry"]] = relationship(
        "RoyaltyEntry",
        back_populates="track",
    )
    integrations: Mapped[list["TrackIntegration"]] = relationship(
        "TrackIntegration",
        back_populates="track",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Track {self.id} isrc={self.isrc} title={self.title}>"
