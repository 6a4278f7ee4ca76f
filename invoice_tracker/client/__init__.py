"""Client side of the invoice tracker: HTTP client and status poller"""
from .profiles import POLLING_PROFILES, PollingProfile, get_profile
from .status_client import InvoiceStatusClient, InvoiceStatusClientError
from .status_poller import PollState, StatusPoller
from .tracking import TrackingOutcome, TrackingResult, track_invoice

__all__ = [
    "POLLING_PROFILES",
    "PollingProfile",
    "get_profile",
    "InvoiceStatusClient",
    "InvoiceStatusClientError",
    "PollState",
    "StatusPoller",
    "TrackingOutcome",
    "TrackingResult",
    "track_invoice",
]
