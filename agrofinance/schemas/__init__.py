"""Pydantic schemas package"""

from agrofinance.schemas.auth import Token, TokenPayload
from agrofinance.schemas.budget import (
    BudgetAlertResponse,
    BudgetCreate,
    BudgetResponse,
    BudgetUpdate,
    BudgetUtilizationResponse,
)
from agrofinance.schemas.debt import DebtCreate, DebtResponse, DebtSummary, DebtUpdate
from agrofinance.schemas.goal import GoalCreate, GoalResponse, GoalUpdate
from agrofinance.schemas.recurring import RecurringCreate, RecurringResponse, RecurringUpdate
from agrofinance.schemas.transaction import (
    SummaryResponse,
    TransactionCreate,
    TransactionCreateResponse,
    TransactionResponse,
    TransactionUpdate,
)

__all__ = [
    "Token",
    "TokenPayload",
    "BudgetAlertResponse",
    "BudgetCreate",
    "BudgetResponse",
    "BudgetUpdate",
    "BudgetUtilizationResponse",
    "DebtCreate",
    "DebtResponse",
    "DebtSummary",
    "DebtUpdate",
    "GoalCreate",
    "GoalResponse",
    "GoalUpdate",
    "RecurringCreate",
    "RecurringResponse",
    "RecurringUpdate",
    "SummaryResponse",
    "TransactionCreate",
    "TransactionCreateResponse",
    "TransactionResponse",
    "TransactionUpdate",
]
