from .create_customer import CreateCustomer
from .get_customer import GetCustomer
from .deactivate_customer import DeactivateCustomer
from .dtos import CreateCustomerCommandDTO, CustomerResponseDTO

__all__ = [
    "CreateCustomer",
    "GetCustomer",
    "DeactivateCustomer",
    "CreateCustomerCommandDTO",
    "CustomerResponseDTO",
]
