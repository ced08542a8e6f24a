import uuid
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.batch import BatchStatusMixin

if TYPE_CHECKING:
    from app.models.royalty_entry import RoyaltyEntry


class FileType(str, Enum):
    """Kinds of distributor uploads."""
    DISTRIBUTOR = "distributor"
    ROYALTY_STATEMENT = "royalty_statement"
    METADATA = "metadata"


class UploadedFile(BatchStatusMixin, Base):
    """Metadata about one distributor CSV upload."""

    __tablename__ = "uploaded_files"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    original_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str] = mapped_column(String(50), nullable=False, default=FileType.DISTRIBUTOR.value)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    record_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    royalty_entries: Mapped[list["RoyaltyEntry"]] = relationship(
        "RoyaltyEntry",
        back_populates="uploaded_file",
    )

    def __repr__(self) -> str:
        return f"<UploadedFile {self.id} name={self.original_name} status={self.status}>"
