"""Admin API Routes

Store statistics, per-status listings and manual cleanup.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from invoice_tracker.app.use_cases.invoices.dtos import (
    InvoiceStatsDTO,
    ListInvoicesResponseDTO,
    SweepResultDTO,
)
from invoice_tracker.app.use_cases.invoices.get_invoice_stats import GetInvoiceStats
from invoice_tracker.app.use_cases.invoices.list_invoices_by_status import ListInvoicesByStatus
from invoice_tracker.app.use_cases.invoices.sweep_expired_records import (
    DEFAULT_MAX_AGE_HOURS,
    SweepExpiredRecords,
)
from invoice_tracker.adapter.repositories.invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from invoice_tracker.adapter.repositories.webhook_event_repository import SqlAlchemyWebhookEventRepository
from invoice_tracker.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_tracker.depends import get_session
from invoice_tracker.domain.invoice_status import InvoiceStatus
from invoice_tracker.api.error import ClientError

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/stats",
    response_model=InvoiceStatsDTO,
    status_code=status.HTTP_200_OK,
)
async def get_stats(session: AsyncSession = Depends(get_session)):
    """Invoice counts per status and the size of the webhook event log"""
    use_case = GetInvoiceStats(
        SqlAlchemyInvoiceStatusRepository(session),
        SqlAlchemyWebhookEventRepository(session),
    )
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return result.value


@router.get(
    "/invoices",
    response_model=ListInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    invoice_status: InvoiceStatus = Query(..., alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """
    List invoices in one status, most recently updated first.

    **Query parameters:**
    - `status` (required): pending, generating, completed or failed
    - `limit` (optional): page size, 1-100 (default 50)
    - `offset` (optional): records to skip
    """
    use_case = ListInvoicesByStatus(SqlAlchemyInvoiceStatusRepository(session))
    result = await use_case.execute(invoice_status, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return result.value


@router.post(
    "/cleanup",
    response_model=SweepResultDTO,
    status_code=status.HTTP_200_OK,
)
async def cleanup(
    max_age_hours: float = Query(default=DEFAULT_MAX_AGE_HOURS, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """
    Delete invoice records and webhook events older than `max_age_hours`.

    Same operation as the invoice sweeper worker, triggered on demand.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = SweepExpiredRecords(
        uow,
        SqlAlchemyInvoiceStatusRepository(session),
        SqlAlchemyWebhookEventRepository(session),
    )
    result = await use_case.execute(max_age_hours=max_age_hours)

    if result.is_err():
        if result.error.code == "VALIDATION_ERROR":
            raise ClientError(result.error)
        raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return result.value
