"""Status lifecycle shared by upload batch records (files and PRS statements)."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Enum as SAEnum, Text
from sqlalchemy.orm import Mapped, mapped_column


class BatchStatus(str, Enum):
    """Processing status of an upload."""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class BatchStatusMixin:
    """
    Columns and transitions for a record created in PROCESSING that moves
    exactly once to COMPLETED or FAILED.
    """

    status: Mapped[BatchStatus] = mapped_column(
        SAEnum(BatchStatus, native_enum=False, length=20, values_callable=_enum_values),
        default=BatchStatus.PROCESSING,
        nullable=False,
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in (BatchStatus.COMPLETED, BatchStatus.FAILED)

    def _leave_processing(self, status: BatchStatus) -> None:
        if self.status != BatchStatus.PROCESSING:
            raise ValueError(
                f"{type(self).__name__} {self.id} is already {self.status.value}; "
                f"cannot move to {status.value}"
            )
        self.status = status

    def mark_completed(self) -> None:
        self._leave_processing(BatchStatus.COMPLETED)

    def mark_failed(self, error_message: str) -> None:
        self._leave_processing(BatchStatus.FAILED)
        self.error_message = error_message
