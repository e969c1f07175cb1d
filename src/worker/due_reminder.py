"""Due Reminder Background Worker

Schedules due reminders and overdue notices for customers with open dues.
"""

import argparse
import asyncio
import logging
from datetime import date
from typing import Callable, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.adapter.services.notification_service import create_notification_service
from src.app.services.notification_service import NotificationDispatcher
from src.app.use_cases.ledger import DueReminderResultDTO, SendDueReminders

logger = logging.getLogger(__name__)


class DueReminderWorker:
    """
    Background worker for customer due reminders

    Each run waits for its messages to be handed over before returning, so
    a run never overlaps the next one's notifications.
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        notifier: Optional[NotificationDispatcher] = None,
        enabled: Optional[bool] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.DUE_REMINDER_ENABLED if enabled is None else enabled
        self.clock = clock
        self.notifier = notifier or NotificationDispatcher(
            create_notification_service(
                ApplicationConfig.NOTIFICATION_WEBHOOK_URL,
                currency=ApplicationConfig.CURRENCY_SYMBOL,
            )
        )

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("DueReminderWorker initialized")

    async def run_once(self) -> DueReminderResultDTO:
        if not self.enabled:
            logger.info("Due reminders are disabled, skipping")
            return DueReminderResultDTO(customers_checked=0, due_reminders=0, overdue_notices=0, execution_time_ms=0)

        async with self.async_session_factory() as session:
            use_case = SendDueReminders(
                customer_repo=SqlAlchemyCustomerRepository(session),
                entry_repo=SqlAlchemyLedgerEntryRepository(session),
                notifier=self.notifier,
                clock=self.clock,
            )
            result = await use_case.execute()

        await self.notifier.drain()

        if result.is_err():
            logger.error(f"Due reminder run failed: {result.error.message}")
            raise RuntimeError(f"Due reminder run failed: {result.error.message}")

        return result.value

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting due reminders with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Due reminder cycle complete. Checked {result.customers_checked} customers, "
                    f"sent {result.due_reminders} reminders and {result.overdue_notices} overdue notices"
                )
            except Exception as e:
                logger.error(f"Due reminder cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.notifier.drain()
        await self.engine.dispose()
        logger.info("DueReminderWorker shutdown complete")


async def main():
    """
    Usage:
        python -m src.worker.due_reminder --once
        python -m src.worker.due_reminder --interval 3600
    """
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Due Reminder Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.DUE_REMINDER_INTERVAL_SECONDS,
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = DueReminderWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Due reminders complete:")
            print(f"  Customers checked: {result.customers_checked}")
            print(f"  Due reminders: {result.due_reminders}")
            print(f"  Overdue notices: {result.overdue_notices}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
