"""In-memory Invoice Status Repository

Process-lifetime dict store. Interchangeable with the SQLAlchemy store;
used by unit tests and when no durable store is wanted.
"""

import asyncio
from datetime import timedelta
from typing import Any, Dict, List, Optional
from invoice_tracker.app.repositories.invoice_status_repository import (
    InvoiceStatusRepository,
    UPDATABLE_FIELDS,
)
from invoice_tracker.domain.base import next_timestamp, utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatus, InvoiceStatusRecord


class InMemoryInvoiceStatusRepository(InvoiceStatusRepository):

    def __init__(self):
        self._records: Dict[str, InvoiceStatusRecord] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _copy(record: InvoiceStatusRecord) -> InvoiceStatusRecord:
        return InvoiceStatusRecord(
            invoice_number=record.invoice_number,
            status=record.status,
            pdf_url=record.pdf_url,
            error_message=record.error_message,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    async def insert(self, invoice_number: str) -> InvoiceStatusRecord:
        async with self._lock:
            record = self._records.get(invoice_number)
            if record is None:
                now = utc_now()
                record = InvoiceStatusRecord(
                    invoice_number=invoice_number,
                    status=InvoiceStatus.PENDING,
                    created_at=now,
                    updated_at=now,
                )
                self._records[invoice_number] = record
            return self._copy(record)

    async def get(self, invoice_number: str) -> Optional[InvoiceStatusRecord]:
        record = self._records.get(invoice_number)
        return self._copy(record) if record is not None else None

    async def update(
        self, invoice_number: str, fields: Dict[str, Any]
    ) -> Optional[InvoiceStatusRecord]:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        async with self._lock:
            record = self._records.get(invoice_number)
            if record is None:
                return None
            for name, value in fields.items():
                setattr(record, name, value)
            record.updated_at = next_timestamp(record.updated_at)
            return self._copy(record)

    async def sweep(self, max_age: timedelta) -> int:
        cutoff = utc_now() - max_age
        async with self._lock:
            expired = [
                number for number, record in self._records.items()
                if record.created_at < cutoff
            ]
            for number in expired:
                del self._records[number]
        return len(expired)

    async def count_by_status(self) -> Dict[InvoiceStatus, int]:
        counts = {status: 0 for status in InvoiceStatus}
        for record in self._records.values():
            counts[record.status] += 1
        return counts

    async def list_by_status(
        self, status: InvoiceStatus, limit: int = 50, offset: int = 0
    ) -> List[InvoiceStatusRecord]:
        matches = sorted(
            (r for r in self._records.values() if r.status == status),
            key=lambda r: r.updated_at,
            reverse=True,
        )
        return [self._copy(r) for r in matches[offset:offset + limit]]
