"""SQLAlchemy Invoice Status Repository Implementation

Implements the invoice record store using SQLAlchemy async session.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_tracker.app.repositories.invoice_status_repository import (
    InvoiceStatusRepository,
    StorageError,
    UPDATABLE_FIELDS,
)
from invoice_tracker.domain.base import next_timestamp, utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatus, InvoiceStatusRecord

logger = logging.getLogger(__name__)


class SqlAlchemyInvoiceStatusRepository(InvoiceStatusRepository):
    """
    SQLAlchemy implementation of InvoiceStatusRepository

    Writes are flushed, not committed; the caller commits through the
    unit of work. SQLAlchemy errors are re-raised as StorageError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _select(self, invoice_number: str) -> Optional[InvoiceStatusRecord]:
        statement = select(InvoiceStatusRecord).where(
            InvoiceStatusRecord.invoice_number == invoice_number
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def insert(self, invoice_number: str) -> InvoiceStatusRecord:
        """
        Create a pending record if absent

        Args:
            invoice_number: Unique invoice number

        Returns:
            The new or existing record
        """
        try:
            existing = await self._select(invoice_number)
            if existing is not None:
                return existing

            record = InvoiceStatusRecord(
                invoice_number=invoice_number,
                status=InvoiceStatus.PENDING,
            )
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
            return record
        except IntegrityError:
            # Lost a concurrent insert on the primary key
            logger.info(f"Invoice {invoice_number} created concurrently, returning existing record")
            try:
                await self.session.rollback()
                existing = await self._select(invoice_number)
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to insert invoice {invoice_number}", e) from e
            if existing is None:
                raise StorageError(f"Invoice {invoice_number} vanished after insert conflict")
            return existing
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to insert invoice {invoice_number}", e) from e

    async def get(self, invoice_number: str) -> Optional[InvoiceStatusRecord]:
        """
        Retrieve record by invoice number

        Returns:
            Record if found, None otherwise
        """
        try:
            return await self._select(invoice_number)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read invoice {invoice_number}", e) from e

    async def update(
        self, invoice_number: str, fields: Dict[str, Any]
    ) -> Optional[InvoiceStatusRecord]:
        """
        Apply a partial update and refresh updated_at

        Returns:
            Updated record, or None if the invoice does not exist
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        try:
            record = await self._select(invoice_number)
            if record is None:
                return None

            for name, value in fields.items():
                setattr(record, name, value)
            record.updated_at = next_timestamp(record.updated_at)

            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
            return record
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update invoice {invoice_number}", e) from e

    async def sweep(self, max_age: timedelta) -> int:
        """
        Delete records created before now - max_age

        Returns:
            Number of records removed
        """
        cutoff = utc_now() - max_age
        statement = delete(InvoiceStatusRecord).where(InvoiceStatusRecord.created_at < cutoff)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError("Failed to sweep invoices", e) from e
        return result.rowcount or 0

    async def count_by_status(self) -> Dict[InvoiceStatus, int]:
        """Count records per status"""
        statement = (
            select(InvoiceStatusRecord.status, func.count())
            .group_by(InvoiceStatusRecord.status)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError("Failed to count invoices", e) from e

        counts = {status: 0 for status in InvoiceStatus}
        for status, count in result.all():
            counts[InvoiceStatus(status)] = count
        return counts

    async def list_by_status(
        self, status: InvoiceStatus, limit: int = 50, offset: int = 0
    ) -> List[InvoiceStatusRecord]:
        """List records with the given status, newest first"""
        statement = (
            select(InvoiceStatusRecord)
            .where(InvoiceStatusRecord.status == status)
            .order_by(InvoiceStatusRecord.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list {status.value} invoices", e) from e
        return list(result.scalars().all())
