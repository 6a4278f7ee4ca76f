"""Submit an invoice and follow it to a final outcome"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from invoice_tracker.client.profiles import PollingProfile, get_profile
from invoice_tracker.client.status_client import InvoiceStatusClient, InvoiceStatusClientError
from invoice_tracker.client.status_poller import PollState, StatusPoller

logger = logging.getLogger(__name__)


class TrackingOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"
    SUBMISSION_FAILED = "submission_failed"


@dataclass
class TrackingResult:
    outcome: TrackingOutcome
    invoice_number: Optional[str] = None
    pdf_url: Optional[str] = None
    error_message: Optional[str] = None
    attempts: int = 0


_OUTCOMES = {
    PollState.STOPPED_SUCCESS: TrackingOutcome.SUCCESS,
    PollState.STOPPED_FAILURE: TrackingOutcome.FAILURE,
    PollState.STOPPED_TIMEOUT: TrackingOutcome.TIMEOUT,
}


async def track_invoice(
    client: InvoiceStatusClient,
    invoice: Dict[str, Any],
    profile: Union[str, PollingProfile, None] = "submission",
) -> TrackingResult:
    """
    Submit invoice and poll its status until it settles

    A 502 from the submission endpoint means the server already marked the
    invoice failed. Any other submission error is reported back with
    report_failure when the invoice number is known.
    """
    if not isinstance(profile, PollingProfile):
        profile = get_profile(profile)

    invoice_number = invoice.get("invoice_number")

    try:
        if invoice_number:
            await client.ensure_invoice(invoice_number)
        submission = await client.submit_invoice(invoice)
    except InvoiceStatusClientError as e:
        logger.error(f"Submission failed for {invoice_number or 'new invoice'}: {e.message}")
        if invoice_number and e.status_code != 502:
            try:
                await client.report_failure(invoice_number, e.message)
            except InvoiceStatusClientError as report_error:
                logger.warning(f"Could not report failure for {invoice_number}: {report_error.message}")
        return TrackingResult(
            outcome=TrackingOutcome.SUBMISSION_FAILED,
            invoice_number=invoice_number,
            error_message=e.message,
        )

    invoice_number = submission["invoice_number"]
    if submission.get("status") == "completed" and submission.get("pdf_url"):
        return TrackingResult(
            outcome=TrackingOutcome.SUCCESS,
            invoice_number=invoice_number,
            pdf_url=submission["pdf_url"],
        )

    poller = StatusPoller(client.get_status, profile)
    poller.watch(invoice_number)
    state = await poller.wait()

    status = poller.status or {}
    return TrackingResult(
        outcome=_OUTCOMES.get(state, TrackingOutcome.TIMEOUT),
        invoice_number=invoice_number,
        pdf_url=status.get("pdf_url"),
        error_message=status.get("error_message") or poller.last_error,
        attempts=poller.attempts,
    )
