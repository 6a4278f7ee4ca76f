"""Workflow Service Interface

Defines the contract for handing an invoice to the external PDF generation
workflow.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class WorkflowSubmissionError(Exception):
    """The workflow rejected the submission or could not be reached"""


class WorkflowService(ABC):
    """
    Abstract PDF generation workflow

    Implementations POST the invoice to a no-code automation webhook.
    Generation is asynchronous: completion is reported later through the
    invoice callback endpoint.
    """

    @abstractmethod
    async def submit_invoice(self, payload: Dict[str, Any]) -> Optional[str]:
        """
        Submit an invoice for PDF generation

        Args:
            payload: Webhook payload built from the invoice

        Returns:
            PDF URL if the workflow answered synchronously with one, else None

        Raises:
            WorkflowSubmissionError: the submission itself failed
        """
        pass
