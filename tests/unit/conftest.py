import pytest
from unittest.mock import AsyncMock, MagicMock

from invoice_tracker.adapter.repositories.in_memory_invoice_status_repository import (
    InMemoryInvoiceStatusRepository,
)
from invoice_tracker.adapter.repositories.in_memory_webhook_event_repository import (
    InMemoryWebhookEventRepository,
)
from invoice_tracker.adapter.services.unit_of_work import InMemoryUnitOfWork
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def memory_uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def invoice_repo():
    """In-memory invoice record store"""
    return InMemoryInvoiceStatusRepository()


@pytest.fixture
def event_repo():
    return InMemoryWebhookEventRepository()


@pytest.fixture
def manager(memory_uow, invoice_repo):
    """InvoiceStatusManager over the in-memory store"""
    return InvoiceStatusManager(memory_uow, invoice_repo)
