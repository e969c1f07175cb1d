"""Ledger error taxonomy

Raised inside the domain and service layer; use cases turn them into
``Result`` errors carrying the same ``code``.
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for every error the ledger core raises"""

    code = "LEDGER_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        if code:
            self.code = code


class InvalidAmount(LedgerError):
    """Negative, non-numeric or non-finite monetary value"""

    code = "INVALID_AMOUNT"


class InvalidEntry(LedgerError):
    """Malformed posting: both or neither of debit/credit, missing fields"""

    code = "INVALID_ENTRY"


class NotFound(LedgerError):
    """Referenced customer, entry or payment does not exist"""

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id=None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(message, code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND")
        self.resource = resource
        self.resource_id = resource_id


class AlreadyVoided(LedgerError):
    code = "ALREADY_VOIDED"


class ConcurrencyConflict(LedgerError):
    """Per-customer critical section timed out or a version check failed"""

    code = "CONCURRENCY_CONFLICT"


class PersistenceFailure(LedgerError):
    """The durable store failed; the outcome of the write is uncertain"""

    code = "PERSISTENCE_FAILURE"
