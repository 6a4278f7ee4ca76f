"""Invoice Callback API Routes

Receives completion notices from the PDF generation workflow.
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from invoice_tracker.api.schemas.invoice_callback_request import InvoiceCallbackSchema
from invoice_tracker.api.security import verify_callback_secret
from invoice_tracker.app.use_cases.invoices.dtos import CallbackAckDTO, CallbackCommandDTO
from invoice_tracker.app.use_cases.invoices.ingest_callback import IngestCallback
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.adapter.repositories.invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from invoice_tracker.adapter.repositories.webhook_event_repository import SqlAlchemyWebhookEventRepository
from invoice_tracker.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_tracker.depends import get_session
from invoice_tracker.api.error import error_response
from invoice_tracker.shared.validation import validation_details

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoice-callback", tags=["Invoice Callback"])


@router.post(
    "",
    response_model=CallbackAckDTO,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_callback_secret)],
    responses={
        400: {
            "description": "Malformed or incomplete callback",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Successful invoices require pdf_url or download_url"
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
                            "message": "Invalid authorization token"
                        }
                    }
                }
            }
        }
    }
)
async def receive_invoice_callback(
    request: Request,
    session: AsyncSession = Depends(get_session)
):
    """
    Record the outcome of an invoice PDF generation run.

    **Authentication:** `Authorization: Bearer <secret>` or `X-API-Key: <secret>`

    **Request body:**
    - `invoice_number` (required): Invoice number
    - `status` (required): success/completed/done, failed/error/failure,
      or processing/generating/pending/in_progress
    - `pdf_url` / `download_url` / `pdfUrl` / `file_url` / `url`:
      PDF location (required on success)
    - `error_message` / `message` / `error` (optional): failure reason

    **Example request:**
    ```json
    {
      "invoice_number": "INV-2025-001",
      "status": "success",
      "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf"
    }
    ```

    **Returns:**
    - 200: Callback accepted (also when local bookkeeping failed)
    - 400: Malformed or incomplete body
    - 401: Authentication failed
    - 500: Unexpected error
    """
    try:
        payload = await request.json()
    except ValueError:
        return error_response(
            "VALIDATION_ERROR", "Request body must be valid JSON", status.HTTP_400_BAD_REQUEST
        )

    if not isinstance(payload, dict):
        return error_response(
            "VALIDATION_ERROR", "Request body must be a JSON object", status.HTTP_400_BAD_REQUEST
        )

    try:
        callback = InvoiceCallbackSchema.model_validate(payload)
    except ValidationError as e:
        details = validation_details(e.errors())
        logger.warning(f"Rejected invoice callback: {details}")
        return error_response(
            "VALIDATION_ERROR",
            "Invalid callback payload",
            status.HTTP_400_BAD_REQUEST,
            details=details,
        )

    try:
        uow = SqlAlchemyUnitOfWork(session)
        manager = InvoiceStatusManager(uow, SqlAlchemyInvoiceStatusRepository(session))
        event_repo = SqlAlchemyWebhookEventRepository(session)

        command = CallbackCommandDTO(
            invoice_number=callback.invoice_number,
            status=callback.status,
            pdf_url=callback.pdf_url,
            error_message=callback.error_message,
            raw_payload=payload,
        )

        use_case = IngestCallback(uow, manager, event_repo)
        result = await use_case.execute(command)
    except Exception as e:
        logger.exception(f"Unexpected error processing callback: {e}")
        return error_response(
            "INTERNAL_ERROR",
            "Internal server error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return result.value


@router.api_route(
    "",
    methods=["GET", "PUT", "DELETE", "PATCH"],
    include_in_schema=False,
)
async def callback_method_not_allowed(request: Request):
    return error_response(
        "METHOD_NOT_ALLOWED",
        f"Method {request.method} not allowed",
        status.HTTP_405_METHOD_NOT_ALLOWED,
        headers={"Allow": "POST"},
    )
