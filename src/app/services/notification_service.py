"""Notification Service Interface

Customers are told about payments and dues through an injected
notification service. The ledger core only issues requests; delivery is the
implementation's business and its outcome never affects a posting.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


class TemplateType(str, Enum):
    PAYMENT_RECEIVED = "payment_received"
    DUE_REMINDER = "due_reminder"
    OVERDUE_NOTICE = "overdue_notice"
    WELCOME = "welcome"


class NotificationService(ABC):
    """
    Abstract notification service for customer messages

    Implementations can deliver via:
    - Log output (development)
    - Webhook to an SMS/WhatsApp gateway
    - Several channels at once
    """

    @abstractmethod
    async def notify(
        self, customer_id: int, template_type: TemplateType, context: Dict[str, Any]
    ) -> bool:
        """
        Send a templated message to a customer

        Args:
            customer_id: Customer to notify
            template_type: Which message to send
            context: Template values (customer_name, phone, amount, ...)

        Returns:
            True if the message was handed over successfully, False otherwise
        """
        pass


class NotificationDispatcher:
    """
    Fire-and-forget wrapper around a NotificationService

    dispatch() schedules delivery on the running loop and returns at once.
    Failures are logged, never raised. Owned by the process bootstrap.
    """

    def __init__(self, service: NotificationService):
        self.service = service
        self._pending: Set[asyncio.Task] = set()

    def dispatch(
        self,
        customer_id: int,
        template_type: TemplateType,
        context: Optional[Dict[str, Any]] = None,
    ) -> asyncio.Task:
        task = asyncio.create_task(self._deliver(customer_id, template_type, dict(context or {})))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled notification (shutdown, tests)"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def _deliver(self, customer_id: int, template_type: TemplateType, context: Dict[str, Any]) -> bool:
        try:
            sent = await self.service.notify(customer_id, template_type, context)
        except Exception as e:
            logger.error(f"Notification {template_type.value} for customer {customer_id} failed: {e}")
            return False
        if not sent:
            logger.warning(f"Notification {template_type.value} for customer {customer_id} was not delivered")
        return sent
