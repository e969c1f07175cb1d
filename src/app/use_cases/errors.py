"""Conversion of domain exceptions into Result errors"""

from src.libs.result import Error
from src.domain.errors import LedgerError


def error_from(exc: LedgerError) -> Error:
    return Error(code=exc.code, message=exc.message, reason=exc.reason)
