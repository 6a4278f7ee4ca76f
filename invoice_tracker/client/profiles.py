"""Named polling profiles

Every call site picks one of these instead of hard-coding an interval
and attempt count.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from config import ApplicationConfig


@dataclass(frozen=True)
class PollingProfile:
    interval_seconds: float
    max_attempts: int

    def __post_init__(self):
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @property
    def budget_seconds(self) -> float:
        """Wall-clock time before the poller gives up"""
        return self.interval_seconds * self.max_attempts


POLLING_PROFILES: Dict[str, PollingProfile] = {
    # Chat-style flow: 15 x 2s = 30s
    "conversational": PollingProfile(interval_seconds=2.0, max_attempts=15),
    # Form submission: 60 x 2s = 120s
    "submission": PollingProfile(interval_seconds=2.0, max_attempts=60),
}


def default_profile() -> PollingProfile:
    return PollingProfile(
        interval_seconds=float(ApplicationConfig.POLL_INTERVAL_SECONDS),
        max_attempts=int(ApplicationConfig.POLL_MAX_ATTEMPTS),
    )


def get_profile(name: Optional[str] = None) -> PollingProfile:
    """Look up a named profile; None returns the configured default"""
    if name is None:
        return default_profile()
    try:
        return POLLING_PROFILES[name]
    except KeyError:
        raise ValueError(
            f"Unknown polling profile '{name}'. Available: {', '.join(sorted(POLLING_PROFILES))}"
        ) from None
