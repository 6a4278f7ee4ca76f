"""Unit tests for ListWebhookEvents, GetInvoiceStats, ListInvoicesByStatus and SweepExpiredRecords"""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.use_cases.invoices.get_invoice_stats import GetInvoiceStats
from invoice_tracker.app.use_cases.invoices.list_invoices_by_status import ListInvoicesByStatus
from invoice_tracker.app.use_cases.invoices.list_webhook_events import ListWebhookEvents
from invoice_tracker.app.use_cases.invoices.sweep_expired_records import SweepExpiredRecords
from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatus
from invoice_tracker.domain.webhook_event import WebhookEvent


async def _add_event(event_repo, invoice_number, event_type="invoice_callback", age=timedelta(0)):
    return await event_repo.create(
        WebhookEvent(
            event_type=event_type,
            invoice_number=invoice_number,
            payload={"invoice_number": invoice_number},
            received_at=utc_now() - age,
        )
    )


@pytest.mark.asyncio
class TestListWebhookEvents:

    async def test_pagination(self, event_repo):
        for i in range(5):
            await _add_event(event_repo, f"INV-{i}")

        result = await ListWebhookEvents(event_repo).execute(limit=2, offset=0)

        assert result.is_ok()
        assert len(result.value.data) == 2
        assert result.value.pagination.total == 5
        assert result.value.pagination.has_more is True

    async def test_filters(self, event_repo):
        await _add_event(event_repo, "INV-1")
        await _add_event(event_repo, "INV-2")
        await _add_event(event_repo, "INV-2", event_type="test")

        result = await ListWebhookEvents(event_repo).execute(
            event_type="invoice_callback", invoice_number="INV-2"
        )

        assert result.value.pagination.total == 1
        assert result.value.data[0].invoice_number == "INV-2"
        assert result.value.pagination.has_more is False


@pytest.mark.asyncio
class TestGetInvoiceStats:

    async def test_counts_by_status(self, manager, invoice_repo, event_repo):
        await manager.create_invoice("INV-1")
        await manager.create_invoice("INV-2")
        await manager.mark_generating("INV-2")
        await _add_event(event_repo, "INV-2")

        result = await GetInvoiceStats(invoice_repo, event_repo).execute()

        assert result.value.total_invoices == 2
        assert result.value.by_status == {
            "pending": 1,
            "generating": 1,
            "completed": 0,
            "failed": 0,
        }
        assert result.value.total_webhook_events == 1


@pytest.mark.asyncio
class TestListInvoicesByStatus:

    async def test_lists_matching_status_newest_first(self, manager, invoice_repo):
        for number in ("INV-1", "INV-2", "INV-3"):
            await manager.create_invoice(number)
        await manager.mark_completed("INV-1", "https://files.example.com/INV-1.pdf")
        await manager.mark_completed("INV-3", "https://files.example.com/INV-3.pdf")

        result = await ListInvoicesByStatus(invoice_repo).execute(InvoiceStatus.COMPLETED)

        assert result.is_ok()
        assert result.value.status == "completed"
        assert [r.invoice_number for r in result.value.data] == ["INV-3", "INV-1"]
        assert result.value.data[0].pdf_url == "https://files.example.com/INV-3.pdf"
        assert result.value.pagination.total == 2
        assert result.value.pagination.has_more is False

    async def test_pagination(self, manager, invoice_repo):
        for i in range(3):
            await manager.create_invoice(f"INV-{i}")

        result = await ListInvoicesByStatus(invoice_repo).execute(
            InvoiceStatus.PENDING, limit=2, offset=0
        )

        assert len(result.value.data) == 2
        assert result.value.pagination.total == 3
        assert result.value.pagination.has_more is True

    async def test_storage_error(self):
        repo = MagicMock()
        repo.list_by_status = AsyncMock(side_effect=StorageError("Failed to list invoices"))

        result = await ListInvoicesByStatus(repo).execute(InvoiceStatus.FAILED)

        assert result.is_err()
        assert result.error.code == "STORAGE_ERROR"

@pytest.mark.asyncio
class TestSweepExpiredRecords:

    async def test_sweeps_old_records_only(self, memory_uow, manager, invoice_repo, event_repo):
        await manager.create_invoice("INV-OLD")
        await manager.create_invoice("INV-NEW")
        invoice_repo._records["INV-OLD"].created_at = utc_now() - timedelta(hours=48)
        await _add_event(event_repo, "INV-OLD", age=timedelta(hours=30))
        await _add_event(event_repo, "INV-NEW")

        result = await SweepExpiredRecords(memory_uow, invoice_repo, event_repo).execute(max_age_hours=24)

        assert result.is_ok()
        assert result.value.invoices == 1
        assert result.value.webhook_events == 1
        assert await invoice_repo.get("INV-OLD") is None
        assert await invoice_repo.get("INV-NEW") is not None

    async def test_negative_age_rejected(self, memory_uow, invoice_repo, event_repo):
        result = await SweepExpiredRecords(memory_uow, invoice_repo, event_repo).execute(max_age_hours=-1)

        assert result.error.code == "VALIDATION_ERROR"

    async def test_failure_rolls_back(self, mock_uow, event_repo):
        repo = MagicMock()
        repo.sweep = AsyncMock(side_effect=RuntimeError("locked"))

        result = await SweepExpiredRecords(mock_uow, repo, event_repo).execute()

        assert result.error.code == "SWEEP_FAILED"
        mock_uow.rollback.assert_called_once()
