"""Unit tests for customer notifications

Tests cover:
- Message rendering from the default templates
- Fire-and-forget dispatch (failures logged, never raised)
- Webhook delivery via httpx
- Composite delivery and the factory
"""

import json
import pytest
import httpx
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from src.app.services.message_templates import format_amount, render_message
from src.app.services.notification_service import NotificationDispatcher, TemplateType


class TestRenderMessage:
    def test_payment_received(self):
        message = render_message(
            TemplateType.PAYMENT_RECEIVED,
            {"customer_name": "Asha", "amount": Decimal("400.00"), "balance": Decimal("1600.00")},
        )

        assert message == (
            "Dear Asha, we have received your payment of Rs. 400.00. "
            "Your remaining balance is Rs. 1,600.00. Thank you."
        )

    def test_currency_override_and_missing_values(self):
        message = render_message(TemplateType.DUE_REMINDER, {"due_amount": Decimal("50")}, currency="$")

        assert message.startswith("Reminder: Your payment of $ 50.00 is due on .")

    def test_format_amount_passes_through_non_decimals(self):
        assert format_amount("2024-02-14") == "2024-02-14"
        assert format_amount(Decimal("1234567.5")) == "1,234,567.50"


@pytest.mark.asyncio
class TestNotificationDispatcher:
    async def test_dispatch_delivers_in_background(self):
        service = MagicMock()
        service.notify = AsyncMock(return_value=True)
        dispatcher = NotificationDispatcher(service)

        dispatcher.dispatch(1, TemplateType.WELCOME, {"customer_name": "Asha"})
        await dispatcher.drain()

        service.notify.assert_awaited_once_with(1, TemplateType.WELCOME, {"customer_name": "Asha"})
        assert dispatcher.pending == 0

    async def test_failure_is_swallowed(self):
        service = MagicMock()
        service.notify = AsyncMock(side_effect=RuntimeError("gateway down"))
        dispatcher = NotificationDispatcher(service)

        task = dispatcher.dispatch(1, TemplateType.WELCOME)
        await dispatcher.drain()

        assert task.result() is False


@pytest.mark.asyncio
class TestWebhookNotificationService:
    async def test_posts_rendered_message(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        service = WebhookNotificationService(
            "https://gateway.test/send", transport=httpx.MockTransport(handler)
        )

        sent = await service.notify(
            7,
            TemplateType.PAYMENT_RECEIVED,
            {
                "customer_name": "Asha",
                "phone": "+919812345678",
                "via": "whatsapp",
                "amount": Decimal("400.00"),
                "balance": Decimal("600.00"),
            },
        )

        assert sent is True
        payload = json.loads(requests[0].content)
        assert payload["type"] == "payment_received"
        assert payload["customer_id"] == 7
        assert payload["to"] == "+919812345678"
        assert payload["channel"] == "whatsapp"
        assert "Rs. 400.00" in payload["message"]

    async def test_http_error_returns_false(self):
        service = WebhookNotificationService(
            "https://gateway.test/send",
            transport=httpx.MockTransport(lambda request: httpx.Response(502)),
        )

        assert await service.notify(7, TemplateType.WELCOME, {"phone": "+1555"}) is False


@pytest.mark.asyncio
class TestCompositeNotificationService:
    async def test_succeeds_if_any_service_succeeds(self):
        failing = MagicMock()
        failing.notify = AsyncMock(side_effect=RuntimeError("down"))
        composite = CompositeNotificationService([failing, LoggingNotificationService()])

        assert await composite.notify(1, TemplateType.WELCOME, {}) is True


def test_factory_without_webhook_returns_logging_service():
    assert isinstance(create_notification_service(None), LoggingNotificationService)


def test_factory_with_webhook_returns_composite():
    service = create_notification_service("https://gateway.test/send", currency="$")

    assert isinstance(service, CompositeNotificationService)
    assert service.services[1].currency == "$"
