"""Unit tests for IngestCallback use case

Tests cover:
- Create-on-first-reference
- completed / failed / generating handling
- Store failures still acknowledged
- Webhook event log entries
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.app.use_cases.invoices.dtos import CallbackCommandDTO
from invoice_tracker.app.use_cases.invoices.ingest_callback import IngestCallback
from invoice_tracker.domain.invoice_status import InvoiceStatus

PDF_URL = "https://files.example.com/invoices/INV-2025-001.pdf"


@pytest.fixture
def ingest_use_case(memory_uow, manager, event_repo):
    return IngestCallback(memory_uow, manager, event_repo)


@pytest.mark.asyncio
class TestIngestCallbackSuccess:

    async def test_completed_callback_creates_and_completes(self, ingest_use_case, manager):
        """
        Given: No record exists for INV-2025-001
        When: A completed callback with a pdf_url arrives
        Then: The record is created and completed, the ack echoes the data
        """
        command = CallbackCommandDTO(
            invoice_number="INV-2025-001",
            status=InvoiceStatus.COMPLETED,
            pdf_url=PDF_URL,
            raw_payload={"invoice_number": "INV-2025-001", "status": "success", "pdf_url": PDF_URL},
        )

        result = await ingest_use_case.execute(command)

        assert result.is_ok()
        ack = result.value
        assert ack.success is True
        assert ack.invoice_number == "INV-2025-001"
        assert ack.status == "completed"
        assert ack.pdf_url == PDF_URL
        assert ack.received_at is not None

        record = await manager.get_status("INV-2025-001")
        assert record.status == InvoiceStatus.COMPLETED
        assert record.pdf_url == PDF_URL

    async def test_failed_callback_uses_default_message(self, ingest_use_case, manager):
        command = CallbackCommandDTO(invoice_number="INV-2025-002", status=InvoiceStatus.FAILED)

        await ingest_use_case.execute(command)

        record = await manager.get_status("INV-2025-002")
        assert record.status == InvoiceStatus.FAILED
        assert record.error_message == "Processing failed"

    async def test_failed_callback_keeps_reported_message(self, ingest_use_case, manager):
        command = CallbackCommandDTO(
            invoice_number="INV-2025-003",
            status=InvoiceStatus.FAILED,
            error_message="Template missing",
        )

        await ingest_use_case.execute(command)

        record = await manager.get_status("INV-2025-003")
        assert record.error_message == "Template missing"

    async def test_processing_callback_marks_generating(self, ingest_use_case, manager):
        command = CallbackCommandDTO(invoice_number="INV-2025-004", status=InvoiceStatus.GENERATING)

        await ingest_use_case.execute(command)

        record = await manager.get_status("INV-2025-004")
        assert record.status == InvoiceStatus.GENERATING

    async def test_repeated_completed_callback_last_write_wins(self, ingest_use_case, manager):
        second_url = "https://files.example.com/invoices/INV-2025-001-v2.pdf"
        for url in (PDF_URL, second_url):
            await ingest_use_case.execute(
                CallbackCommandDTO(
                    invoice_number="INV-2025-001",
                    status=InvoiceStatus.COMPLETED,
                    pdf_url=url,
                )
            )

        record = await manager.get_status("INV-2025-001")
        assert record.pdf_url == second_url


@pytest.mark.asyncio
class TestIngestCallbackStoreFailure:

    async def test_store_failure_is_still_acknowledged(self, mock_uow, event_repo):
        repo = MagicMock()
        repo.insert = AsyncMock(side_effect=StorageError("database is locked"))
        manager = InvoiceStatusManager(mock_uow, repo)
        use_case = IngestCallback(mock_uow, manager, event_repo)

        result = await use_case.execute(
            CallbackCommandDTO(
                invoice_number="INV-2025-001",
                status=InvoiceStatus.COMPLETED,
                pdf_url=PDF_URL,
            )
        )

        assert result.is_ok()
        assert result.value.status == "completed"
        assert event_repo.events[0].processed_result["persisted"] is False

    async def test_event_log_failure_is_swallowed(self, memory_uow, manager):
        broken_events = MagicMock()
        broken_events.create = AsyncMock(side_effect=StorageError("no space"))
        use_case = IngestCallback(memory_uow, manager, broken_events)

        result = await use_case.execute(
            CallbackCommandDTO(invoice_number="INV-2025-001", status=InvoiceStatus.GENERATING)
        )

        assert result.is_ok()
        assert memory_uow.rollbacks == 1


@pytest.mark.asyncio
class TestIngestCallbackEventLog:

    async def test_event_records_raw_payload(self, ingest_use_case, event_repo):
        payload = {"invoice_number": "INV-2025-001", "status": "done", "download_url": PDF_URL}

        await ingest_use_case.execute(
            CallbackCommandDTO(
                invoice_number="INV-2025-001",
                status=InvoiceStatus.COMPLETED,
                pdf_url=PDF_URL,
                raw_payload=payload,
            )
        )

        assert len(event_repo.events) == 1
        event = event_repo.events[0]
        assert event.event_type == "invoice_callback"
        assert event.invoice_number == "INV-2025-001"
        assert event.payload == payload
        assert event.processed_result["persisted"] is True
        assert event.processed_result["status"] == "completed"

    async def test_event_log_is_optional(self, memory_uow, manager):
        use_case = IngestCallback(memory_uow, manager)

        result = await use_case.execute(
            CallbackCommandDTO(invoice_number="INV-2025-001", status=InvoiceStatus.GENERATING)
        )

        assert result.is_ok()
