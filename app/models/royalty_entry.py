"""RoyaltyEntry model: one line item from a distributor CSV."""
import uuid
from datetime import datetime, date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, String, Text, DateTime, Date, Numeric, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.track import Track
    from app.models.uploaded_file import UploadedFile


# JSON, not JSONB: extras keep their header order
ExtrasType = JSON


class RoyaltyEntry(Base):
    """
    Individual line item from a distributor export.

    Created once during ingestion and never modified afterwards.
    Columns the parser did not recognize are kept verbatim in `extras`.
    """

    __tablename__ = "royalty_entries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    track_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tracks.id"),
        nullable=False,
        index=True,
    )
    uploaded_file_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("uploaded_files.id"),
        nullable=False,
        index=True,
    )

    # Dates (format varies by distributor)
    date_inserted: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    reporting_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    sale_month: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Source info
    store: Mapped[str] = mapped_column(Text, nullable=False, default="Unknown")
    country_of_sale: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    song_or_album: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    release_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Financial
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    team_percentage: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=7, scale=4),
        nullable=True,
    )
    songwriter_royalties_withheld: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=8),
        default=Decimal("0"),
        nullable=False,
    )
    earnings: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=8),
        nullable=False,
    )
    net_earnings: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=18, scale=8),
        nullable=True,
    )
    # Literal percentage text with "%" removed ("15", not "0.15")
    commission: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    splits_percent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    commission_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    recoup: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=8),
        default=Decimal("0"),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    extras: Mapped[Optional[dict]] = mapped_column(ExtrasType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    track: Mapped["Track"] = relationship("Track", back_populates="royalty_entries")
    uploaded_file: Mapped["UploadedFile"] = relationship(
        "UploadedFile",
        back_populates="royalty_entries",
    )

    def __repr__(self) -> str:
        return f"<RoyaltyEntry {self.id} track={self.track_id} earnings={self.earnings}>"
