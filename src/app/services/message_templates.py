"""Default customer message templates"""

from decimal import Decimal
from typing import Any, Dict

from src.app.services.notification_service import TemplateType

DEFAULT_CURRENCY_SYMBOL = "Rs."

DEFAULT_TEMPLATES: Dict[TemplateType, str] = {
    TemplateType.PAYMENT_RECEIVED: (
        "Dear {customer_name}, we have received your payment of {currency} {amount}. "
        "Your remaining balance is {currency} {balance}. Thank you."
    ),
    TemplateType.DUE_REMINDER: (
        "Reminder: Your payment of {currency} {due_amount} is due on {due_date}. "
        "Kindly pay on time."
    ),
    TemplateType.OVERDUE_NOTICE: (
        "Your payment of {currency} {due_amount} was due on {due_date}. "
        "Please clear it at the earliest."
    ),
    TemplateType.WELCOME: (
        "Welcome {customer_name}! Your account has been created. "
        "Your current balance is {currency} {balance}."
    ),
}


class _Blank(dict):
    def __missing__(self, key):
        return ""


def format_amount(value: Any) -> str:
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    return str(value)


def render_message(
    template_type: TemplateType,
    context: Dict[str, Any],
    currency: str = DEFAULT_CURRENCY_SYMBOL,
    templates: Dict[TemplateType, str] = DEFAULT_TEMPLATES,
) -> str:
    """Fill a template; unknown placeholders render empty"""
    values = _Blank({key: format_amount(value) for key, value in context.items()})
    values.setdefault("currency", currency)
    return templates[template_type].format_map(values)
