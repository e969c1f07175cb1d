"""CreateCustomer Use Case"""

import logging
import re

from sqlalchemy.exc import IntegrityError

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.services.notification_service import NotificationDispatcher, TemplateType
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import error_from
from src.domain import money
from src.domain.customer import Customer
from src.domain.errors import LedgerError
from .dtos import CreateCustomerCommandDTO, CustomerResponseDTO

logger = logging.getLogger(__name__)

E164_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")


def normalize_phone(phone: str) -> str:
    return PHONE_SEPARATORS.sub("", phone or "")


class CreateCustomer:
    """
    Use Case: Open a credit account for a new customer

    Business Rules:
    1. Phone must be E.164 and unique across customers
    2. Credit limit must be non-negative
    3. New customers start at a zero balance with no ledger entries
    4. A welcome message is sent when SMS is enabled
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        notifier: NotificationDispatcher,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.notifier = notifier

    async def execute(self, command: CreateCustomerCommandDTO) -> Result[CustomerResponseDTO]:
        phone = normalize_phone(command.phone)
        if not E164_PATTERN.match(phone):
            return Return.err(
                Error(
                    code="INVALID_PHONE",
                    message="Phone number must be in E.164 format",
                    reason=f"phone={command.phone}",
                )
            )

        try:
            credit_limit = money.require_non_negative(command.credit_limit, "credit_limit")
        except LedgerError as e:
            return Return.err(error_from(e))

        try:
            async with self.uow:
                if await self.customer_repo.get_by_phone(phone):
                    return Return.err(
                        Error(
                            code="DUPLICATE_PHONE",
                            message=f"A customer with phone {phone} already exists",
                        )
                    )

                customer = await self.customer_repo.create(
                    Customer(
                        name=command.name.strip(),
                        phone=phone,
                        email=command.email,
                        address=command.address,
                        credit_limit=credit_limit,
                        default_due_period=command.default_due_period,
                        sms_enabled=command.sms_enabled,
                    )
                )
                await self.uow.commit()

        except IntegrityError as e:
            return Return.err(
                Error(
                    code="DUPLICATE_PHONE",
                    message=f"A customer with phone {phone} already exists",
                    reason=str(e.orig) if e.orig is not None else str(e),
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="CREATE_CUSTOMER_FAILED",
                    message="Failed to create customer",
                    reason=str(e),
                )
            )

        logger.info(f"Created customer {customer.id} ({customer.phone})")

        if customer.sms_enabled:
            self.notifier.dispatch(
                customer.id,
                TemplateType.WELCOME,
                {"customer_name": customer.name, "phone": customer.phone, "balance": customer.current_balance},
            )

        return Return.ok(CustomerResponseDTO.from_customer(customer))
