"""Invoice Status Repository Interface

Defines the contract for the invoice record store.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Optional
from invoice_tracker.domain.invoice_status import InvoiceStatus, InvoiceStatusRecord


class StorageError(Exception):
    """
    Raised when the underlying store fails (I/O, constraint violation)

    Repositories never retry; callers decide whether the failure is fatal.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


UPDATABLE_FIELDS = ("status", "pdf_url", "error_message")


class InvoiceStatusRepository(ABC):
    """
    Repository interface for InvoiceStatusRecord persistence

    Keyed by invoice_number; every write touches exactly one row.
    """

    @abstractmethod
    async def insert(self, invoice_number: str) -> InvoiceStatusRecord:
        """
        Create a pending record if absent

        A record that already exists (including one created by a concurrent
        insert that won the race) is returned unchanged.

        Args:
            invoice_number: Unique invoice number

        Returns:
            The new or existing record
        """
        pass

    @abstractmethod
    async def get(self, invoice_number: str) -> Optional[InvoiceStatusRecord]:
        """
        Retrieve record by invoice number

        Returns:
            Record if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(
        self, invoice_number: str, fields: Dict[str, Any]
    ) -> Optional[InvoiceStatusRecord]:
        """
        Apply a partial update and refresh updated_at

        Only keys present in fields are written. Keys outside
        UPDATABLE_FIELDS are rejected with ValueError.

        Returns:
            Updated record, or None if the invoice does not exist
        """
        pass

    @abstractmethod
    async def sweep(self, max_age: timedelta) -> int:
        """
        Delete records created before now - max_age

        Returns:
            Number of records removed
        """
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[InvoiceStatus, int]:
        """Count records per status (every status present, zero if none)"""
        pass

    @abstractmethod
    async def list_by_status(
        self, status: InvoiceStatus, limit: int = 50, offset: int = 0
    ) -> List[InvoiceStatusRecord]:
        """List records with the given status, newest first"""
        pass
