"""Notification Service Implementations

Provides concrete implementations for sending customer messages.
"""

import logging
from typing import Any, Dict, Optional
import httpx
from src.app.services.message_templates import DEFAULT_CURRENCY_SYMBOL, render_message
from src.app.services.notification_service import NotificationService, TemplateType

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs rendered messages

    Useful for development and testing, or as a fallback.
    """

    def __init__(self, currency: str = DEFAULT_CURRENCY_SYMBOL):
        self.currency = currency

    async def notify(self, customer_id: int, template_type: TemplateType, context: Dict[str, Any]) -> bool:
        """
        Log the message

        Returns:
            Always True (logging never fails)
        """
        logger.info(
            f"[{template_type.value.upper()}] Customer: {customer_id}, "
            f"To: {context.get('phone', '-')}, "
            f"Message: {render_message(template_type, context, self.currency)}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that hands messages to an SMS/WhatsApp gateway

    Sends a JSON payload to the configured webhook URL.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        currency: str = DEFAULT_CURRENCY_SYMBOL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST messages to
            timeout: Request timeout in seconds
            currency: Currency symbol used when rendering amounts
            transport: Optional httpx transport (tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.currency = currency
        self.transport = transport

    async def notify(self, customer_id: int, template_type: TemplateType, context: Dict[str, Any]) -> bool:
        payload = {
            "type": template_type.value,
            "customer_id": customer_id,
            "to": context.get("phone"),
            "channel": context.get("via", "sms"),
            "message": render_message(template_type, context, self.currency),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook {template_type.value} notification sent for customer {customer_id}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send {template_type.value} notification for customer {customer_id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def notify(self, customer_id: int, template_type: TemplateType, context: Dict[str, Any]) -> bool:
        """
        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.notify(customer_id, template_type, context):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(
    webhook_url: Optional[str] = None,
    currency: str = DEFAULT_CURRENCY_SYMBOL,
) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.
        currency: Currency symbol for rendered messages

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService(currency=currency)]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url, currency=currency))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
