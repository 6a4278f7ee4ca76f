from .unit_of_work import UnitOfWork
from .invoice_status_manager import InvoiceStatusManager
from .workflow_service import WorkflowService, WorkflowSubmissionError

__all__ = [
    "UnitOfWork",
    "InvoiceStatusManager",
    "WorkflowService",
    "WorkflowSubmissionError",
]
