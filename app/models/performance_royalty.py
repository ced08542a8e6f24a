import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, DateTime, Numeric, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.royalty_entry import ExtrasType

if TYPE_CHECKING:
    from app.models.work import Work
    from app.models.prs_statement import PrsStatement


class PerformanceRoyalty(Base):
    """One performance entry (broadcast / public performance) from a PRS statement."""

    __tablename__ = "performance_royalties"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    work_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("works.id"),
        nullable=False,
        index=True,
    )
    prs_statement_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("prs_statements.id"),
        nullable=False,
        index=True,
    )

    usage_territory: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    broadcast_region: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    period: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    production: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    performances: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    royalty_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), default="GBP", nullable=False)

    extras: Mapped[Optional[dict]] = mapped_column(ExtrasType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    work: Mapped["Work"] = relationship("Work", back_populates="performance_royalties")
    prs_statement: Mapped["PrsStatement"] = relationship(
        "PrsStatement",
        back_populates="performance_royalties",
    )

    def __repr__(self) -> str:
        return f"<PerformanceRoyalty {self.id} work={self.work_id} amount={self.royalty_amount}>"
