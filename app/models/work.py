import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Text, DateTime, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.performance_royalty import PerformanceRoyalty
    from app.models.track import Track


class Work(Base):
    """A canonical composition, unique by PRS work number."""

    __tablename__ = "works"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    work_no: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)

    # Interested parties (writers / publishers)
    ip1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip3: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip4: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    your_share_percent: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=7, scale=4),
        nullable=True,
    )

    # Soft link to the recording of this composition
    track_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("tracks.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    performance_royalties: Mapped[list["PerformanceRoyalty"]] = relationship(
        "PerformanceRoyalty",
        back_populates="work",
    )
    track: Mapped[Optional["Track"]] = relationship("Track")

    def __repr__(self) -> str:
        return f"<Work {self.id} work_no={self.work_no} title={self.title}>"
