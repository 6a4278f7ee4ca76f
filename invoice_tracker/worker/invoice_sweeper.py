"""Invoice Sweeper Background Worker

Periodically deletes invoice status records and webhook events older
than the configured age. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from invoice_tracker.adapter.repositories.invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from invoice_tracker.adapter.repositories.webhook_event_repository import SqlAlchemyWebhookEventRepository
from invoice_tracker.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_tracker.app.use_cases.invoices import SweepExpiredRecords, SweepResultDTO
from invoice_tracker.depends import ensure_sqlite_directory, init_db

logger = logging.getLogger(__name__)


class InvoiceSweeperWorker:
    """
    Background worker for age-based cleanup

    Usage:
        # Run once
        worker = InvoiceSweeperWorker()
        result = await worker.run_once()

        # Run continuously
        worker = InvoiceSweeperWorker()
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        max_age_hours: Optional[float] = None,
    ):
        """
        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            max_age_hours: Records older than this are removed
                (defaults to ApplicationConfig.SWEEP_MAX_AGE_HOURS)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.max_age_hours = float(
            max_age_hours if max_age_hours is not None else ApplicationConfig.SWEEP_MAX_AGE_HOURS
        )

        ensure_sqlite_directory(self.db_uri)
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self._tables_ready = False

        logger.info(f"InvoiceSweeperWorker initialized with max_age_hours={self.max_age_hours}")

    async def run_once(self) -> SweepResultDTO:
        """
        Run one cleanup pass

        Returns:
            SweepResultDTO with the number of removed rows
        """
        if not self._tables_ready:
            await init_db(self.engine)
            self._tables_ready = True

        async with self.async_session_factory() as session:
            uow = SqlAlchemyUnitOfWork(session)
            use_case = SweepExpiredRecords(
                uow=uow,
                invoice_repo=SqlAlchemyInvoiceStatusRepository(session),
                event_repo=SqlAlchemyWebhookEventRepository(session),
            )

            result = await use_case.execute(max_age_hours=self.max_age_hours)

            if result.is_err():
                logger.error(f"Sweep failed: {result.error.message} ({result.error.reason})")
                raise RuntimeError(f"Sweep failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 3600):
        """
        Run cleanup continuously; a failed cycle is logged and retried
        on the next interval.
        """
        logger.info(f"Starting invoice sweeper with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Sweep cycle complete. Removed {result.invoices} invoices and "
                    f"{result.webhook_events} webhook events in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("InvoiceSweeperWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m invoice_tracker.worker.invoice_sweeper --once

        # Run continuously with custom interval and age
        python -m invoice_tracker.worker.invoice_sweeper --interval 600 --max-age-hours 48
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Invoice Sweeper Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.SWEEP_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 3600)"
    )
    parser.add_argument(
        "--max-age-hours", type=float, default=None,
        help="Remove records older than this many hours (default: 24)"
    )
    args = parser.parse_args()

    worker = InvoiceSweeperWorker(max_age_hours=args.max_age_hours)

    try:
        if args.once:
            result = await worker.run_once()
            print("Sweep complete:")
            print(f"  Invoices removed: {result.invoices}")
            print(f"  Webhook events removed: {result.webhook_events}")
            print(f"  Execution time: {result.execution_time_ms}ms")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
