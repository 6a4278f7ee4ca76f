"""Invoice Submission API Routes"""

from fastapi import APIRouter, Depends, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from invoice_tracker.api.schemas.invoice_request import SubmitInvoiceSchema
from invoice_tracker.app.use_cases.invoices.dtos import (
    LineItemDTO,
    SubmitInvoiceCommandDTO,
    SubmitInvoiceResponseDTO,
)
from invoice_tracker.app.use_cases.invoices.submit_invoice import SubmitInvoice
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.app.services.workflow_service import WorkflowService
from invoice_tracker.adapter.repositories.invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from invoice_tracker.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_tracker.depends import get_session, get_workflow_service
from invoice_tracker.api.error import ClientError

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post(
    "",
    response_model=SubmitInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        502: {
            "description": "Workflow rejected or did not answer",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "WORKFLOW_SUBMISSION_FAILED",
                            "message": "Invoice INV-2025-001 could not be submitted for generation"
                        }
                    }
                }
            }
        },
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invalid request parameters"
                        }
                    }
                }
            }
        }
    }
)
async def submit_invoice(
    request: SubmitInvoiceSchema,
    http_request: Request,
    session: AsyncSession = Depends(get_session),
    workflow_service: WorkflowService = Depends(get_workflow_service),
):
    """
    Submit an invoice for PDF generation.

    Creates the tracking record, forwards the invoice to the generation
    workflow and returns immediately. Poll
    `GET /api/invoice-status/{invoice_number}` for the outcome.

    **Returns:**
    - 200: Invoice submitted (status `generating`, or `completed` when the
      workflow answered with a PDF URL right away)
    - 400: Invalid invoice data
    - 502: Workflow submission failed (record marked `failed`)
    """
    uow = SqlAlchemyUnitOfWork(session)
    manager = InvoiceStatusManager(uow, SqlAlchemyInvoiceStatusRepository(session))

    command = SubmitInvoiceCommandDTO(
        **request.model_dump(exclude={"line_items"}),
        line_items=[
            LineItemDTO(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in request.line_items
        ],
    )

    use_case = SubmitInvoice(
        manager,
        workflow_service,
        source=http_request.app.state.config.WORKFLOW_SOURCE,
    )
    result = await use_case.execute(command)

    if result.is_err():
        if result.error.code == "WORKFLOW_SUBMISSION_FAILED":
            raise ClientError(result.error, status_code=status.HTTP_502_BAD_GATEWAY)
        if result.error.code == "STORAGE_ERROR":
            raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        raise ClientError(result.error)

    return result.value
