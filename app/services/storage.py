"""
Catalog storage.

Persistence for the ingestion pipeline: batch records, get-or-create of
canonical Tracks and Works, and the plain listing queries used by the API.

get-or-create is safe against concurrent uploads: the insert runs inside a
SAVEPOINT and a unique-key conflict falls back to fetching the row that won.
Existing rows are never updated (first write wins).
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from app.core.database import Base
from app.models import (
    BatchStatus,
    PerformanceRoyalty,
    PrsStatement,
    RoyaltyEntry,
    Track,
    UploadedFile,
    Work,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class DatabaseStorage:
    """Storage operations bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Batch records
    # ------------------------------------------------------------------

    async def create_uploaded_file(
        self,
        filename: str,
        original_name: str,
        file_type: str,
        file_size: Optional[int],
    ) -> UploadedFile:
        """Store a distributor upload in PROCESSING and commit it."""
        uploaded = UploadedFile(
            filename=filename,
            original_name=original_name,
            file_type=file_type,
            file_size=file_size,
            record_count=0,
            status=BatchStatus.PROCESSING,
        )
        self.db.add(uploaded)
        await self.db.commit()
        await self.db.refresh(uploaded)
        return uploaded

    async def create_prs_statement(
        self,
        filename: str,
        original_name: str,
        statement_period: Optional[str] = None,
        statement_date: Optional[date] = None,
    ) -> PrsStatement:
        """Store a PRS statement upload in PROCESSING and commit it."""
        statement = PrsStatement(
            filename=filename,
            original_name=original_name,
            statement_period=statement_period,
            statement_date=statement_date,
            work_count=0,
            status=BatchStatus.PROCESSING,
        )
        self.db.add(statement)
        await self.db.commit()
        await self.db.refresh(statement)
        return statement

    # ------------------------------------------------------------------
    # Canonical identities
    # ------------------------------------------------------------------

    async def _find(
        self,
        model: Type[ModelT],
        key_column: InstrumentedAttribute,
        key: str,
    ) -> Optional[ModelT]:
        result = await self.db.execute(select(model).where(key_column == key))
        return result.scalar_one_or_none()

    async def _get_or_create(
        self,
        model: Type[ModelT],
        key_column: InstrumentedAttribute,
        key: str,
        attributes: Dict[str, Any],
    ) -> ModelT:
        existing = await self._find(model, key_column, key)
        if existing is not None:
            return existing

        instance = model(**attributes)
        try:
            async with self.db.begin_nested():
                self.db.add(instance)
        except IntegrityError:
            # Another upload created the same key first
            logger.info(f"{model.__name__} {key} created concurrently; using existing row")
            existing = await self._find(model, key_column, key)
            if existing is None:
                raise
            return existing

        logger.info(f"Created new {model.__name__.lower()}: {key} (id={instance.id})")
        return instance

    async def get_or_create_track(self, isrc: str, attributes: Dict[str, Any]) -> Track:
        """Get the Track for an ISRC, creating it from `attributes` on first sight."""
        return await self._get_or_create(Track, Track.isrc, isrc, {**attributes, "isrc": isrc})

    async def get_or_create_work(self, work_no: str, attributes: Dict[str, Any]) -> Work:
        """Get the Work for a PRS work number, creating it on first sight."""
        return await self._get_or_create(Work, Work.work_no, work_no, {**attributes, "work_no": work_no})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_uploaded_files(self) -> List[UploadedFile]:
        result = await self.db.execute(
            select(UploadedFile).order_by(UploadedFile.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def get_track(self, track_id: UUID) -> Optional[Track]:
        return await self.db.get(Track, track_id)

    async def list_royalty_entries(self, track_id: Optional[UUID] = None) -> List[RoyaltyEntry]:
        """Line items, newest first, optionally for one track."""
        query = select(RoyaltyEntry).order_by(RoyaltyEntry.created_at.desc())
        if track_id is not None:
            query = query.where(RoyaltyEntry.track_id == track_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_prs_statements(self) -> List[PrsStatement]:
        result = await self.db.execute(
            select(PrsStatement).order_by(PrsStatement.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def get_prs_statement(self, statement_id: UUID) -> Optional[PrsStatement]:
        return await self.db.get(PrsStatement, statement_id)

    async def list_performance_royalties(
        self,
        work_id: Optional[UUID] = None,
        statement_id: Optional[UUID] = None,
    ) -> List[PerformanceRoyalty]:
        """Performance entries, largest royalty first."""
        query = select(PerformanceRoyalty).order_by(PerformanceRoyalty.royalty_amount.desc())
        if work_id is not None:
            query = query.where(PerformanceRoyalty.work_id == work_id)
        if statement_id is not None:
            query = query.where(PerformanceRoyalty.prs_statement_id == statement_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())
