"""
Typed error taxonomy shared by services and the HTTP layer.

Services raise these instead of returning empty or zeroed values, and a single
exception handler turns them into ``{"detail": ..., "type": ...}`` responses.
They subclass ``ValueError`` so callers that only care about "bad input or
missing record" can keep catching that.
"""

from enum import Enum

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    """Kinds of failure surfaced to API clients."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class FinanceError(ValueError):
    """Base class for errors raised by the finance services."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]


class NotFoundError(FinanceError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class ValidationError(FinanceError):
    kind = ErrorKind.VALIDATION


class ConflictError(FinanceError):
    kind = ErrorKind.CONFLICT


class UnavailableError(FinanceError):
    kind = ErrorKind.UNAVAILABLE


async def finance_error_handler(request: Request, exc: FinanceError) -> JSONResponse:
    """Render a ``FinanceError`` as a JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": exc.kind.value},
    )
