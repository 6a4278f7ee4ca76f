"""Workflow Event API Routes

Receives {eventType, payload, metadata} envelopes from the automation
workflow.
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from invoice_tracker.api.schemas.workflow_event_request import WorkflowEventSchema
from invoice_tracker.api.security import verify_callback_secret
from invoice_tracker.app.use_cases.invoices.dtos import WorkflowEventAckDTO, WorkflowEventCommandDTO
from invoice_tracker.app.use_cases.invoices.ingest_workflow_event import IngestWorkflowEvent
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.adapter.repositories.invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from invoice_tracker.adapter.repositories.webhook_event_repository import SqlAlchemyWebhookEventRepository
from invoice_tracker.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_tracker.depends import get_session
from invoice_tracker.api.error import error_response
from invoice_tracker.shared.validation import validation_details

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks/workflow", tags=["Workflow Events"])


@router.post(
    "",
    response_model=WorkflowEventAckDTO,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_callback_secret)],
    responses={
        400: {
            "description": "Envelope does not match the expected schema",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Request data does not match expected schema"
                        }
                    }
                }
            }
        },
        401: {
            "description": "Missing or invalid shared secret",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "UNAUTHORIZED",
                            "message": "Authorization header is required"
                        }
                    }
                }
            }
        }
    }
)
async def receive_workflow_event(
    request: Request,
    session: AsyncSession = Depends(get_session)
):
    """
    Process an event envelope from the automation workflow.

    **Authentication:** same shared secret as the invoice callback

    **Supported event types:** `invoice_processed`, `invoice_generated`,
    `data_processed`, `workflow_completed`. Other types are acknowledged
    with `result.success = false` and still logged.

    **Returns:**
    - 200: Envelope processed (see `result` for the per-event outcome)
    - 400: Invalid JSON or envelope shape
    - 401: Authentication failed
    - 500: Unexpected error
    """
    try:
        body = await request.json()
    except ValueError:
        return error_response(
            "VALIDATION_ERROR", "Request body must be valid JSON", status.HTTP_400_BAD_REQUEST
        )

    try:
        envelope = WorkflowEventSchema.model_validate(body)
    except ValidationError as e:
        details = validation_details(e.errors())
        logger.warning(f"Rejected workflow event: {details}")
        return error_response(
            "VALIDATION_ERROR",
            "Request data does not match expected schema",
            status.HTTP_400_BAD_REQUEST,
            details=details,
        )

    try:
        uow = SqlAlchemyUnitOfWork(session)
        manager = InvoiceStatusManager(uow, SqlAlchemyInvoiceStatusRepository(session))

        command = WorkflowEventCommandDTO(
            event_type=envelope.event_type,
            payload=envelope.payload,
            event_metadata=envelope.metadata_dict(),
        )

        use_case = IngestWorkflowEvent(uow, manager, SqlAlchemyWebhookEventRepository(session))
        result = await use_case.execute(command)
    except Exception as e:
        logger.exception(f"Unexpected error processing workflow event: {e}")
        return error_response(
            "INTERNAL_ERROR",
            "Internal server error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return result.value
