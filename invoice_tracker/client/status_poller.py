"""Status poller

Polls the status query endpoint for one invoice at a fixed interval until
it reaches a terminal state or the attempt budget runs out.

State machine:
    idle -> polling           watch(invoice_number)
    polling -> stopped-success   status completed, or a pdf_url is present
    polling -> stopped-failure   status failed
    polling -> stopped-timeout   max_attempts queries and one more interval
                                 without a terminal status
    polling -> idle           stop()

watch() or refetch() from any state re-arms the poller with fresh counters.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from invoice_tracker.client.profiles import PollingProfile, get_profile

logger = logging.getLogger(__name__)

FetchStatus = Callable[[str], Awaitable[Dict[str, Any]]]


class PollState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    STOPPED_SUCCESS = "stopped-success"
    STOPPED_FAILURE = "stopped-failure"
    STOPPED_TIMEOUT = "stopped-timeout"

    @property
    def is_stopped(self) -> bool:
        return self not in (PollState.IDLE, PollState.POLLING)


class StatusPoller:
    """
    Usage:
        poller = StatusPoller(client.get_status, get_profile("submission"))
        poller.watch("INV-2025-001")
        state = await poller.wait()
    """

    def __init__(self, fetch_status: FetchStatus, profile: Optional[PollingProfile] = None):
        self._fetch_status = fetch_status
        self.profile = profile or get_profile()

        self.state = PollState.IDLE
        self.invoice_number: Optional[str] = None
        self.status: Optional[Dict[str, Any]] = None
        self.last_error: Optional[str] = None
        self.attempts = 0

        # Bumped on every watch/stop; a loop whose generation is stale
        # discards whatever its in-flight query returns.
        self._generation = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._done: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None
        self._detached = set()

    @property
    def max_attempts(self) -> int:
        return self.profile.max_attempts

    @property
    def is_polling(self) -> bool:
        return self.state == PollState.POLLING

    @property
    def is_completed(self) -> bool:
        return self.state == PollState.STOPPED_SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.state == PollState.STOPPED_FAILURE

    @property
    def is_timed_out(self) -> bool:
        return self.state == PollState.STOPPED_TIMEOUT

    @property
    def pdf_url(self) -> Optional[str]:
        return (self.status or {}).get("pdf_url")

    @property
    def time_remaining(self) -> float:
        if not self.is_polling:
            return 0.0
        return max(0, self.max_attempts - self.attempts) * self.profile.interval_seconds

    def watch(self, invoice_number: str) -> asyncio.Task:
        """Start polling invoice_number, replacing any current watch"""
        if not invoice_number:
            raise ValueError("invoice_number is required")

        self._halt()
        self.invoice_number = invoice_number
        self.status = None
        self.last_error = None
        self.attempts = 0
        self.state = PollState.POLLING

        self._stop_event = asyncio.Event()
        self._done = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, invoice_number, self._stop_event)
        )
        logger.debug(
            f"Polling {invoice_number} every {self.profile.interval_seconds}s "
            f"(max {self.max_attempts} attempts)"
        )
        return self._task

    def refetch(self) -> asyncio.Task:
        """Re-arm the poller for the current invoice number"""
        if not self.invoice_number:
            raise ValueError("Nothing to refetch: no invoice is being watched")
        return self.watch(self.invoice_number)

    def stop(self) -> None:
        """
        Halt polling immediately

        An in-flight query is left to finish but its result is discarded.
        A poller that was still polling returns to idle; terminal states
        are kept.
        """
        self._halt()
        if not self.state.is_stopped:
            self.state = PollState.IDLE

    async def wait(self, timeout: Optional[float] = None) -> PollState:
        """Wait until polling ends (terminal state or stop) and return the state"""
        if self._done is None:
            return self.state
        await asyncio.wait_for(self._done.wait(), timeout=timeout)
        return self.state

    def _halt(self) -> None:
        self._generation += 1
        if self._stop_event is not None:
            self._stop_event.set()
        if self._done is not None:
            self._done.set()
        if self._task is not None and not self._task.done():
            # keep a reference until the in-flight query settles
            self._detached.add(self._task)
            self._task.add_done_callback(self._detached.discard)
        self._task = None

    def _finish(self, state: PollState) -> None:
        self.state = state
        if self._done is not None:
            self._done.set()
        logger.info(f"Stopped polling {self.invoice_number}: {state.value} after {self.attempts} attempts")

    @staticmethod
    def _terminal_state(payload: Dict[str, Any]) -> Optional[PollState]:
        status = payload.get("status")
        if status == "completed" or payload.get("pdf_url"):
            return PollState.STOPPED_SUCCESS
        if status == "failed":
            return PollState.STOPPED_FAILURE
        return None

    async def _run(self, generation: int, invoice_number: str, stop_event: asyncio.Event) -> None:
        while True:
            payload, error = None, None
            try:
                payload = await self._fetch_status(invoice_number)
            except Exception as e:
                error = e

            if generation != self._generation:
                return

            self.attempts += 1
            if error is not None:
                self.last_error = str(error) or type(error).__name__
                logger.warning(f"Status query for {invoice_number} failed: {self.last_error}")
            else:
                self.last_error = None
                self.status = payload
                terminal = self._terminal_state(payload or {})
                if terminal is not None:
                    self._finish(terminal)
                    return

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.profile.interval_seconds)
            except asyncio.TimeoutError:
                pass

            if generation != self._generation:
                return

            if self.attempts >= self.max_attempts:
                self._finish(PollState.STOPPED_TIMEOUT)
                return
