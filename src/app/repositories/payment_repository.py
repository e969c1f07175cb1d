"""Payment Repository Interface

Defines the contract for payment persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.payment import Payment


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    receipt_number is unique; create raises IntegrityError on collision.
    """

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        pass

    @abstractmethod
    async def get_by_receipt_number(self, receipt_number: str) -> Optional[Payment]:
        pass

    @abstractmethod
    async def get_by_ledger_entry_id(self, entry_id: int) -> Optional[Payment]:
        """Payment whose completion credit is the given ledger entry, if any"""
        pass

    @abstractmethod
    async def get_by_customer_id(
        self, customer_id: int, limit: int = 50, offset: int = 0
    ) -> Tuple[List[Payment], int]:
        """
        Retrieve a page of payments for a customer, newest first

        Returns:
            Tuple of (payments, total count)
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
