"""Webhook Event Log API Routes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from invoice_tracker.app.use_cases.invoices.dtos import ListWebhookEventsResponseDTO
from invoice_tracker.app.use_cases.invoices.list_webhook_events import ListWebhookEvents
from invoice_tracker.adapter.repositories.webhook_event_repository import SqlAlchemyWebhookEventRepository
from invoice_tracker.depends import get_session
from invoice_tracker.api.error import ClientError

router = APIRouter(prefix="/webhook-events", tags=["Webhook Events"])


@router.get(
    "",
    response_model=ListWebhookEventsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_webhook_events(
    event_type: Optional[str] = Query(default=None),
    invoice_number: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """
    List received webhook events, newest first.

    **Query parameters:**
    - `event_type` (optional): e.g. `invoice_callback`
    - `invoice_number` (optional)
    - `limit` (1-100, default 50), `offset` (default 0)
    """
    use_case = ListWebhookEvents(SqlAlchemyWebhookEventRepository(session))
    result = await use_case.execute(
        event_type=event_type,
        invoice_number=invoice_number,
        limit=limit,
        offset=offset,
    )

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return result.value
