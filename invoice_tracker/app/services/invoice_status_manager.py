"""Invoice Status Manager

Named status operations over the invoice record store. Every mutation is
committed on its own; commit failures are rolled back and surfaced as
StorageError.

No transition graph is enforced: any status can overwrite any other,
including moving a completed invoice back to generating.
"""

import logging
from typing import Any, Dict, Optional
from invoice_tracker.app.repositories.invoice_status_repository import (
    InvoiceStatusRepository,
    StorageError,
)
from invoice_tracker.app.services.unit_of_work import UnitOfWork
from invoice_tracker.domain.invoice_status import InvoiceStatus, InvoiceStatusRecord

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class InvoiceStatusManager:

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceStatusRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def _commit(self, invoice_number: str) -> None:
        try:
            await self.uow.commit()
        except StorageError:
            await self.uow.rollback()
            raise
        except Exception as e:
            await self.uow.rollback()
            raise StorageError(f"Failed to commit invoice {invoice_number}", e) from e

    async def _write(self, invoice_number: str, fields: Dict[str, Any]) -> Optional[InvoiceStatusRecord]:
        try:
            record = await self.invoice_repo.update(invoice_number, fields)
        except StorageError:
            await self.uow.rollback()
            raise

        if record is None:
            logger.warning(f"Invoice not found: {invoice_number}")
            return None

        await self._commit(invoice_number)
        logger.info(f"Updated invoice {invoice_number}: {fields}")
        return record

    async def create_invoice(self, invoice_number: str) -> InvoiceStatusRecord:
        """Create a pending record, or return the existing one untouched"""
        try:
            record = await self.invoice_repo.insert(invoice_number)
        except StorageError:
            await self.uow.rollback()
            raise
        await self._commit(invoice_number)
        logger.info(f"Ensured invoice status record for: {invoice_number}")
        return record

    async def mark_generating(self, invoice_number: str) -> Optional[InvoiceStatusRecord]:
        return await self._write(invoice_number, {"status": InvoiceStatus.GENERATING})

    async def mark_completed(self, invoice_number: str, pdf_url: str) -> Optional[InvoiceStatusRecord]:
        """pdf_url is expected to be validated by the caller"""
        return await self._write(
            invoice_number, {"status": InvoiceStatus.COMPLETED, "pdf_url": pdf_url}
        )

    async def mark_failed(self, invoice_number: str, error_message: str) -> Optional[InvoiceStatusRecord]:
        return await self._write(
            invoice_number, {"status": InvoiceStatus.FAILED, "error_message": error_message}
        )

    async def get_status(self, invoice_number: str) -> Optional[InvoiceStatusRecord]:
        return await self.invoice_repo.get(invoice_number)

    async def update_status(
        self,
        invoice_number: str,
        status: Optional[InvoiceStatus] = _UNSET,
        pdf_url: Optional[str] = _UNSET,
        error_message: Optional[str] = _UNSET,
    ) -> Optional[InvoiceStatusRecord]:
        """
        Generic partial update

        Only arguments that are passed are written; passing None explicitly
        clears pdf_url or error_message.

        Returns:
            Updated record, or None if the invoice does not exist
        """
        fields: Dict[str, Any] = {}
        if status is not _UNSET and status is not None:
            fields["status"] = InvoiceStatus(status)
        if pdf_url is not _UNSET:
            fields["pdf_url"] = pdf_url
        if error_message is not _UNSET:
            fields["error_message"] = error_message
        return await self._write(invoice_number, fields)
