"""Customer Repository Interface

Defines the contract for customer persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """
    Repository interface for Customer persistence

    Balance fields are only moved through update_balance, which applies an
    optimistic version check on top of the row lock taken by get_by_id.
    """

    @abstractmethod
    async def get_by_id(self, customer_id: int, for_update: bool = False) -> Optional[Customer]:
        """
        Retrieve customer by ID

        Args:
            customer_id: Customer ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Customer if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Optional[Customer]:
        pass

    @abstractmethod
    async def get_all(self, active_only: bool = False) -> List[Customer]:
        pass

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """
        Create a new customer

        Returns:
            Created Customer with generated ID
        """
        pass

    @abstractmethod
    async def update_balance(
        self,
        customer_id: int,
        expected_version: int,
        new_balance: Decimal,
        debit: Decimal,
        credit: Decimal,
    ) -> bool:
        """
        Move the customer's balance if the stored version still matches

        Args:
            customer_id: Customer ID
            expected_version: Version read at the start of the posting
            new_balance: Balance after the posting
            debit: Amount added to total_purchases
            credit: Amount added to total_payments

        Returns:
            False when the version check failed (concurrent writer)
        """
        pass

    @abstractmethod
    async def deactivate(self, customer_id: int) -> Optional[Customer]:
        pass
