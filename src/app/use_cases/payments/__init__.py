from .record_payment import RecordPayment
from .void_payment import VoidPayment
from .list_payments import ListPayments
from .generate_receipt import GenerateReceipt
from .dtos import (
    RecordPaymentCommandDTO,
    VoidPaymentCommandDTO,
    PaymentResponseDTO,
    ListPaymentsResponseDTO,
    ReceiptDTO,
)

__all__ = [
    "RecordPayment",
    "VoidPayment",
    "ListPayments",
    "GenerateReceipt",
    "RecordPaymentCommandDTO",
    "VoidPaymentCommandDTO",
    "PaymentResponseDTO",
    "ListPaymentsResponseDTO",
    "ReceiptDTO",
]
