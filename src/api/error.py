"""HTTP error surface

Use cases return ``Result`` errors; routes raise them as ClientError and the
application handler renders ``{"error": {"code", "message", "reason"}}``.
"""

from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from src.libs.result import Error

CONFLICT_CODES = {
    "ALREADY_VOIDED",
    "CONCURRENCY_CONFLICT",
    "DUPLICATE_PHONE",
    "ENTRY_BELONGS_TO_PAYMENT",
}
UNAVAILABLE_CODES = {"PERSISTENCE_FAILURE"}


def status_for(error: Error) -> int:
    if error.code.endswith("NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    if error.code in CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    if error.code in UNAVAILABLE_CODES:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if error.code.endswith("_FAILED"):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error)

    def to_body(self) -> dict:
        body = {"code": self.error.code, "message": self.error.message}
        if self.error.reason:
            body["reason"] = self.error.reason
        return {"error": body}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())
