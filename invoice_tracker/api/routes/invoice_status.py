"""Invoice Status API Routes

Status query and direct transition endpoints used by the UI.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from invoice_tracker.api.schemas.invoice_status_request import (
    EnsureInvoiceSchema,
    UpdateInvoiceStatusSchema,
)
from invoice_tracker.app.use_cases.invoices.dtos import (
    EnsureInvoiceCommandDTO,
    EnsureInvoiceResponseDTO,
    InvoiceStatusResponseDTO,
    UpdateInvoiceStatusCommandDTO,
)
from invoice_tracker.app.use_cases.invoices.ensure_invoice import EnsureInvoice
from invoice_tracker.app.use_cases.invoices.get_invoice_status import GetInvoiceStatus
from invoice_tracker.app.use_cases.invoices.update_invoice_status import UpdateInvoiceStatus
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.adapter.repositories.invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from invoice_tracker.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_tracker.depends import get_session
from invoice_tracker.api.error import ClientError

router = APIRouter(prefix="/invoice-status", tags=["Invoice Status"])

_ERROR_STATUS = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "STORAGE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _manager(session: AsyncSession) -> InvoiceStatusManager:
    return InvoiceStatusManager(
        SqlAlchemyUnitOfWork(session), SqlAlchemyInvoiceStatusRepository(session)
    )


def _raise_for(result) -> None:
    if result.is_err():
        raise ClientError(
            result.error,
            status_code=_ERROR_STATUS.get(result.error.code, status.HTTP_400_BAD_REQUEST),
        )


@router.get(
    "/{invoice_number:path}",
    response_model=InvoiceStatusResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        500: {
            "description": "Storage failure",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "STORAGE_ERROR",
                            "message": "Failed to read invoice status"
                        }
                    }
                }
            }
        }
    }
)
async def get_invoice_status(
    invoice_number: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Get the generation status of an invoice.

    Never returns 404: an invoice this service has not seen yet is reported
    as `pending` with a message explaining it is waiting for processing.

    **Returns:**
    - 200: Status record (real or pending placeholder)
    - 500: Storage failure
    """
    use_case = GetInvoiceStatus(_manager(session))
    result = await use_case.execute(invoice_number)
    _raise_for(result)
    return result.value


@router.patch(
    "/{invoice_number:path}",
    response_model=InvoiceStatusResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Invoice not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_NOT_FOUND",
                            "message": "Invoice INV-2025-001 not found"
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
async def update_invoice_status(
    invoice_number: str,
    request: UpdateInvoiceStatusSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Directly update an invoice status record.

    Used for manual correction and for failures reported by the client
    (e.g. the workflow webhook rejected the submission). Only fields
    present in the body are written; `null` clears `pdf_url` or
    `error_message`.

    **Request body:**
    - `status` (optional): pending, generating, completed or failed
    - `pdf_url` (optional): absolute http(s) URL
    - `error_message` (optional): failure reason

    **Returns:**
    - 200: Updated record
    - 400: Invalid status token or URL
    - 404: Invoice does not exist
    """
    command = UpdateInvoiceStatusCommandDTO(
        invoice_number=invoice_number,
        **request.model_dump(include=request.model_fields_set),
    )

    use_case = UpdateInvoiceStatus(_manager(session))
    result = await use_case.execute(command)
    _raise_for(result)
    return result.value


@router.post(
    "",
    response_model=EnsureInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def ensure_invoice(
    request: EnsureInvoiceSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Make sure a status record exists before submission starts.

    Creates a `pending` record when missing and optionally applies a status.

    **Example request:**
    ```json
    {"invoice_number": "INV-2025-001", "status": "generating"}
    ```
    """
    command = EnsureInvoiceCommandDTO(
        invoice_number=request.invoice_number,
        status=request.status,
    )

    use_case = EnsureInvoice(_manager(session))
    result = await use_case.execute(command)
    _raise_for(result)
    return result.value
