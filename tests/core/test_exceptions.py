"""
Tests for the error taxonomy and configuration parsing.
"""

import json
from decimal import Decimal

import pytest

from agrofinance.core.config import Settings
from agrofinance.core.exceptions import (
    ConflictError,
    ErrorKind,
    FinanceError,
    NotFoundError,
    UnavailableError,
    ValidationError,
    finance_error_handler,
)


@pytest.mark.parametrize(
    "error, status_code, kind",
    [
        (NotFoundError("Budget"), 404, ErrorKind.NOT_FOUND),
        (ValidationError("bad"), 422, ErrorKind.VALIDATION),
        (ConflictError("taken"), 409, ErrorKind.CONFLICT),
        (UnavailableError("down"), 503, ErrorKind.UNAVAILABLE),
    ],
)
def test_status_codes(error: FinanceError, status_code: int, kind: ErrorKind) -> None:
    assert error.status_code == status_code
    assert error.kind == kind
    assert isinstance(error, ValueError)


@pytest.mark.asyncio
async def test_handler_renders_detail_and_type() -> None:
    response = await finance_error_handler(None, NotFoundError("Budget"))
    assert response.status_code == 404
    assert json.loads(response.body) == {"detail": "Budget not found", "type": "not_found"}


@pytest.mark.parametrize("raw, expected", [("0.2", Decimal("0.2")), ("-0.1", Decimal("0")), ("abc", Decimal("0"))])
def test_commission_rate_parsing(raw: str, expected: Decimal) -> None:
    assert Settings(commission_rate=raw).commission_rate == expected
