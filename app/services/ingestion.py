"""
Statement ingestion service.

One pipeline handles both statement types:

    CSV -> mapped rows -> resolve parent identity -> persist children -> close batch

A StatementFormat supplies the parts that differ (parser, parent
get-or-create, child builder, batch finalizer). The batch record is always
left COMPLETED or FAILED, never PROCESSING.

Transaction boundaries:
- identities (Tracks / Works) are committed as soon as resolution finishes;
- line items and the batch status are committed together, so a failed
  insert leaves no partial line items for the batch. Identities created
  before the failure are kept.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, Tuple, Union
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import FileTooLargeError, IngestionError, UnsupportedFileError
from app.models import (
    FileType,
    PerformanceRoyalty,
    PrsStatement,
    RoyaltyEntry,
    UploadedFile,
)
from app.services.identity import GetOrCreate, IdentityResolver
from app.services.parsers import DistributorParser, ParsedRow, PrsParser, RecordParser
from app.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)


CSV_CONTENT_TYPES = ("text/csv", "application/csv")

Batch = Union[UploadedFile, PrsStatement]


@dataclass
class IngestionSummary:
    """Outcome of one ingestion run."""
    records_persisted: int = 0
    distinct_parents: int = 0
    rows_skipped: int = 0
    summary_rows: int = 0
    total_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class StatementFormat:
    """The format-specific parts of the ingestion pipeline."""
    name: str
    parser: RecordParser
    get_or_create: Callable[[DatabaseStorage], GetOrCreate]
    build_child: Callable[[Any, UUID, ParsedRow], Any]
    finalize: Callable[[Any, IngestionSummary], None]


def _build_royalty_entry(batch: UploadedFile, track_id: UUID, row: ParsedRow) -> RoyaltyEntry:
    return RoyaltyEntry(track_id=track_id, uploaded_file_id=batch.id, **row.child)


def _finalize_uploaded_file(batch: UploadedFile, summary: IngestionSummary) -> None:
    batch.record_count = summary.records_persisted
    batch.mark_completed()


def _build_performance_royalty(
    batch: PrsStatement,
    work_id: UUID,
    row: ParsedRow,
) -> PerformanceRoyalty:
    return PerformanceRoyalty(work_id=work_id, prs_statement_id=batch.id, **row.child)


def _finalize_prs_statement(batch: PrsStatement, summary: IngestionSummary) -> None:
    batch.total_royalties = summary.total_amount
    batch.work_count = summary.distinct_parents
    batch.mark_completed()


DISTRIBUTOR_FORMAT = StatementFormat(
    name="distributor",
    parser=DistributorParser(),
    get_or_create=lambda storage: storage.get_or_create_track,
    build_child=_build_royalty_entry,
    finalize=_finalize_uploaded_file,
)

PRS_FORMAT = StatementFormat(
    name="prs",
    parser=PrsParser(),
    get_or_create=lambda storage: storage.get_or_create_work,
    build_child=_build_performance_royalty,
    finalize=_finalize_prs_statement,
)


class IngestionPipeline:
    """Runs one statement file through a StatementFormat."""

    def __init__(self, db: AsyncSession, statement_format: StatementFormat):
        self.db = db
        self.format = statement_format
        self.storage = DatabaseStorage(db)

    async def run(self, batch: Batch, content: Union[str, bytes]) -> IngestionSummary:
        """
        Ingest `content` into `batch`.

        The batch must already be stored in PROCESSING. On success it is
        COMPLETED with its counts; on any error it is FAILED with the error
        text and the error is re-raised.
        """
        batch_id = batch.id
        try:
            return await self._ingest(batch, content)
        except IngestionError as e:
            logger.warning(f"{self.format.name} upload {batch_id} rejected: {e.message}")
            await self._fail(batch, e.message)
            raise
        except Exception as e:
            logger.exception(f"{self.format.name} upload {batch_id} failed")
            await self._fail(batch, str(e))
            raise

    async def _ingest(self, batch: Batch, content: Union[str, bytes]) -> IngestionSummary:
        parsed = self.format.parser.parse(content)
        summary = IngestionSummary(rows_skipped=parsed.skipped)
        resolver = IdentityResolver(self.format.get_or_create(self.storage))

        children = []
        for row in parsed.rows:
            parent_id = await resolver.resolve(row.natural_key, row.parent)
            if row.is_summary:
                summary.summary_rows += 1
                continue
            children.append(self.format.build_child(batch, parent_id, row))
            summary.total_amount += row.amount

        # Identities are kept even if the line-item insert below fails
        await self.db.commit()

        summary.records_persisted = len(children)
        summary.distinct_parents = resolver.distinct_count
        self.db.add_all(children)
        self.format.finalize(batch, summary)
        await self.db.commit()

        logger.info(
            f"{self.format.name} upload {batch.id} completed: "
            f"{summary.records_persisted} records, {summary.distinct_parents} parents, "
            f"{summary.rows_skipped} skipped, {summary.summary_rows} summary rows"
        )
        return summary

    async def _fail(self, batch: Batch, message: str) -> None:
        await self.db.rollback()
        await self.db.refresh(batch)
        batch.mark_failed(message)
        await self.db.commit()


def stored_filename(original_name: str) -> str:
    """Name a stored upload: `<epoch-millis>-<original>`."""
    return f"{int(time.time() * 1000)}-{original_name}"


def validate_csv_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    max_bytes: Optional[int] = None,
) -> None:
    """
    Reject uploads before any record is created.

    Raises:
        FileTooLargeError: the upload exceeds the size cap
        UnsupportedFileError: neither the name nor the content type says CSV
    """
    limit = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES
    if size > limit:
        raise FileTooLargeError(limit)

    is_csv_name = bool(filename) and filename.lower().endswith(".csv")
    is_csv_type = (content_type or "").split(";")[0].strip().lower() in CSV_CONTENT_TYPES
    if not (is_csv_name or is_csv_type):
        raise UnsupportedFileError()


async def read_csv_upload(file: UploadFile) -> bytes:
    """
    Validate an uploaded CSV and return its bytes.

    The declared size is checked before the body is read, and the length
    actually read is checked after, for clients that send no size.
    """
    if file.size is not None:
        validate_csv_upload(file.filename, file.content_type, file.size)
    content = await file.read()
    validate_csv_upload(file.filename, file.content_type, len(content))
    return content


async def ingest_distributor_file(
    db: AsyncSession,
    original_name: str,
    content: bytes,
    file_type: str = FileType.DISTRIBUTOR.value,
) -> Tuple[UploadedFile, IngestionSummary]:
    """Record a distributor upload and ingest it."""
    storage = DatabaseStorage(db)
    uploaded = await storage.create_uploaded_file(
        filename=stored_filename(original_name),
        original_name=original_name,
        file_type=file_type,
        file_size=len(content),
    )
    logger.info(f"Processing distributor upload {uploaded.id} ({original_name}, {len(content)} bytes)")

    summary = await IngestionPipeline(db, DISTRIBUTOR_FORMAT).run(uploaded, content)
    return uploaded, summary


async def ingest_prs_statement(
    db: AsyncSession,
    original_name: str,
    content: bytes,
    statement_period: Optional[str] = None,
    statement_date: Optional[date] = None,
) -> Tuple[PrsStatement, IngestionSummary]:
    """Record a PRS statement upload and ingest it."""
    storage = DatabaseStorage(db)
    statement = await storage.create_prs_statement(
        filename=stored_filename(original_name),
        original_name=original_name,
        statement_period=statement_period,
        statement_date=statement_date,
    )
    logger.info(f"Processing PRS statement {statement.id} ({original_name}, {len(content)} bytes)")

    summary = await IngestionPipeline(db, PRS_FORMAT).run(statement, content)
    return statement, summary
