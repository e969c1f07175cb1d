"""SendDueReminders Use Case

Schedules due reminders and overdue notices for customers who owe money.
"""

import logging
import time
from datetime import date
from typing import Callable

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services import due_aggregator
from src.app.services.notification_service import NotificationDispatcher, TemplateType
from .dtos import DueReminderResultDTO

logger = logging.getLogger(__name__)


class SendDueReminders:
    """
    Use Case: Remind customers about dues

    Business Rules:
    1. Only active customers with SMS enabled are contacted
    2. Overdue balance -> overdue_notice for the overdue amount
    3. Otherwise something due today or within a week -> due_reminder
    4. Notifications are fire-and-forget; the result counts requests only
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        entry_repo: LedgerEntryRepository,
        notifier: NotificationDispatcher,
        clock: Callable[[], date] = date.today,
    ):
        self.customer_repo = customer_repo
        self.entry_repo = entry_repo
        self.notifier = notifier
        self.clock = clock

    async def execute(self) -> Result[DueReminderResultDTO]:
        start_time = time.time()
        today = self.clock()
        checked = due_reminders = overdue_notices = 0

        try:
            for customer in await self.customer_repo.get_all(active_only=True):
                if not customer.sms_enabled:
                    continue
                checked += 1

                entries = [entry async for entry in self.entry_repo.iter_by_customer(customer.id)]
                summary = due_aggregator.due_summary(entries, today)
                context = {"customer_name": customer.name, "phone": customer.phone}

                if summary.overdue_amount > 0:
                    context.update(
                        due_amount=summary.overdue_amount,
                        due_date=summary.oldest_overdue_date.isoformat(),
                    )
                    self.notifier.dispatch(customer.id, TemplateType.OVERDUE_NOTICE, context)
                    overdue_notices += 1
                elif summary.due_today + summary.due_this_week > 0:
                    context.update(
                        due_amount=summary.due_today + summary.due_this_week,
                        due_date=summary.next_due_date.isoformat(),
                    )
                    self.notifier.dispatch(customer.id, TemplateType.DUE_REMINDER, context)
                    due_reminders += 1
        except Exception as e:
            logger.error(f"Due reminder run failed: {e}")
            return Return.err(
                Error(
                    code="DUE_REMINDERS_FAILED",
                    message="Failed to send due reminders",
                    reason=str(e),
                )
            )

        execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Due reminders: checked={checked}, reminders={due_reminders}, "
            f"overdue_notices={overdue_notices} in {execution_time_ms}ms"
        )
        return Return.ok(
            DueReminderResultDTO(
                customers_checked=checked,
                due_reminders=due_reminders,
                overdue_notices=overdue_notices,
                execution_time_ms=execution_time_ms,
            )
        )
