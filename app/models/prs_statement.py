"""PrsStatement model for performance-royalty statement uploads."""
import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, Date, Numeric, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.batch import BatchStatusMixin

if TYPE_CHECKING:
    from app.models.performance_royalty import PerformanceRoyalty


class PrsStatement(BatchStatusMixin, Base):
    """
    One PRS statement upload.

    `total_royalties` and `work_count` are computed at ingestion time so
    statement lists can be shown without summing entries.
    """

    __tablename__ = "prs_statements"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    original_name: Mapped[str] = mapped_column(Text, nullable=False)
    statement_period: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    statement_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    total_royalties: Mapped[Decimal] = mapped_column(
        Numeric(precision=15, scale=2),
        default=Decimal("0"),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), default="GBP", nullable=False)
    work_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    performance_royalties: Mapped[list["PerformanceRoyalty"]] = relationship(
        "PerformanceRoyalty",
        back_populates="prs_statement",
    )

    def __repr__(self) -> str:
        return f"<PrsStatement {self.id} period={self.statement_period} status={self.status}>"
